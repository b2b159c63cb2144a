"""Statements for model.compile(), training callbacks and model.fit()."""

from netcompiler.compiler.literals import format_string_list
from netcompiler.schemas.project import Config

EARLY_STOPPING_VAR = "early_stopping"
REDUCE_LR_VAR = "reduce_lr"
DATA_VAR = "data"
LABEL_VAR = "label"


class ConfigCompiler:
    def __init__(
        self,
        monitor_root: str = "http://localhost:9000",
        monitor_path: str = "/publish/epoch/end/",
        validation_split: float = 0.2,
    ) -> None:
        self.monitor_root = monitor_root
        self.monitor_path = monitor_path
        self.validation_split = validation_split

    def emit(self, config: Config, model: str = "model") -> list[str]:
        statements = [
            f"{model}.compile("
            f"optimizer=tf.keras.optimizers.{config.optimizer}(learning_rate={config.learning_rate!r}), "
            f'loss="{config.loss}", '
            f"metrics={format_string_list(config.metrics)})"
        ]

        es = config.early_stopping
        if es.usage:
            statements.append(
                f"{EARLY_STOPPING_VAR} = tf.keras.callbacks.EarlyStopping("
                f'monitor="{es.monitor}", patience={es.patience}, min_delta={es.min_delta!r}, '
                f'mode="{es.mode}", restore_best_weights={es.restore_best_weights})'
            )

        lr = config.learning_rate_reduction
        if lr.usage:
            statements.append(
                f"{REDUCE_LR_VAR} = tf.keras.callbacks.ReduceLROnPlateau("
                f'monitor="{lr.monitor}", factor={lr.factor!r}, patience={lr.patience}, '
                f"min_lr={lr.min_lr!r})"
            )
        return statements

    def callbacks(self, config: Config, scope: str = "") -> list[str]:
        """Callback expressions for fit(), in fixed order.

        The remote monitor is always first; early stopping and learning-rate
        reduction follow only when enabled. ``scope`` qualifies identifiers
        defined in another module, e.g. ``"model."``.
        """
        result = [
            f'tf.keras.callbacks.RemoteMonitor(root="{self.monitor_root}", path="{self.monitor_path}")'
        ]
        if config.early_stopping.usage:
            result.append(f"{scope}{EARLY_STOPPING_VAR}")
        if config.learning_rate_reduction.usage:
            result.append(f"{scope}{REDUCE_LR_VAR}")
        return result

    def emit_fit(self, config: Config, model: str = "model", scope: str = "") -> str:
        return (
            f"{model}.fit({DATA_VAR}, {LABEL_VAR}, "
            f"epochs={config.epochs}, batch_size={config.batch_size}, "
            f"validation_split={self.validation_split!r}, "
            f"callbacks=[{', '.join(self.callbacks(config, scope))}])"
        )
