from collections.abc import Mapping
from types import MappingProxyType

from netcompiler.compiler.literals import format_keyword
from netcompiler.errors import UnsupportedTypeError
from netcompiler.schemas.params import PARAM_TYPES
from netcompiler.schemas.project import Content, Module

DEFAULT_NAMESPACES: Mapping[str, str] = MappingProxyType(
    {
        "Layer": "tf.keras.layers",
        "Math": "tf.math",
    }
)

MODEL_VAR = "model"


class ModuleCompiler:
    """Emit one assignment per layer declaration.

    ``d1 = tf.keras.layers.Dense(units=10)(x)``
    """

    def __init__(self, namespaces: Mapping[str, str] = DEFAULT_NAMESPACES) -> None:
        self.namespaces = MappingProxyType(dict(namespaces))

    def namespace(self, module: Module) -> str:
        try:
            return self.namespaces[module.category]
        except KeyError:
            raise UnsupportedTypeError(
                f"Module {module.name!r}: no namespace for category {module.category!r}"
            ) from None

    def emit(self, module: Module) -> str:
        param_type = PARAM_TYPES.get(module.type)
        if param_type is None or type(module.param) is not param_type:
            raise UnsupportedTypeError(
                f"Module {module.name!r}: unsupported layer type {module.type!r}"
            )

        args = ", ".join(format_keyword(key, raw) for key, raw in module.param.items())
        statement = f"{module.name} = {self.namespace(module)}.{module.type}({args})"
        if module.input is not None and module.type != "Input":
            statement += f"({module.input})"
        return statement

    def emit_model(self, content: Content) -> str:
        return f"{MODEL_VAR} = tf.keras.Model(inputs={content.input}, outputs={content.output})"
