import keyword
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

from netcompiler.schemas.params import (
    ActivationParam,
    AveragePooling2DParam,
    BatchNormalizationParam,
    Conv2DParam,
    DenseParam,
    DropoutParam,
    FlattenParam,
    InputParam,
    MaxPool2DParam,
)

# Identifiers the generated scripts define themselves
RESERVED_NAMES = frozenset(
    {"tf", "tfa", "model", "data", "label", "early_stopping", "reduce_lr"}
)

_SAFE_TEXT = r'^[^"\\\n\r]+$'


def _check_identifier(value: str) -> str:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise ValueError(f"{value!r} is not a valid identifier")
    if value in RESERVED_NAMES:
        raise ValueError(f"{value!r} is reserved")
    return value


class ModuleBase(BaseModel):
    model_config = {"frozen": True}

    category: str = Field(..., min_length=1)
    name: str
    input: str | None = None
    output: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _check_identifier(value)


class InputModule(ModuleBase):
    type: Literal["Input"] = "Input"
    param: InputParam = Field(default_factory=InputParam)


class Conv2DModule(ModuleBase):
    type: Literal["Conv2D"] = "Conv2D"
    param: Conv2DParam = Field(default_factory=Conv2DParam)


class DenseModule(ModuleBase):
    type: Literal["Dense"] = "Dense"
    param: DenseParam = Field(default_factory=DenseParam)


class AveragePooling2DModule(ModuleBase):
    type: Literal["AveragePooling2D"] = "AveragePooling2D"
    param: AveragePooling2DParam = Field(default_factory=AveragePooling2DParam)


class MaxPool2DModule(ModuleBase):
    type: Literal["MaxPool2D"] = "MaxPool2D"
    param: MaxPool2DParam = Field(default_factory=MaxPool2DParam)


class ActivationModule(ModuleBase):
    type: Literal["Activation"] = "Activation"
    param: ActivationParam = Field(default_factory=ActivationParam)


class DropoutModule(ModuleBase):
    type: Literal["Dropout"] = "Dropout"
    param: DropoutParam = Field(default_factory=DropoutParam)


class BatchNormalizationModule(ModuleBase):
    type: Literal["BatchNormalization"] = "BatchNormalization"
    param: BatchNormalizationParam = Field(default_factory=BatchNormalizationParam)


class FlattenModule(ModuleBase):
    type: Literal["Flatten"] = "Flatten"
    param: FlattenParam = Field(default_factory=FlattenParam)


Module = Annotated[
    Union[
        InputModule,
        Conv2DModule,
        DenseModule,
        AveragePooling2DModule,
        MaxPool2DModule,
        ActivationModule,
        DropoutModule,
        BatchNormalizationModule,
        FlattenModule,
    ],
    Field(discriminator="type"),
]


class Content(BaseModel):
    model_config = {"frozen": True}

    input: str
    output: str
    layers: list[Module] = Field(..., min_length=1)


class EarlyStoppingConfig(BaseModel):
    usage: bool = False
    monitor: str = Field("val_loss", pattern=_SAFE_TEXT)
    patience: int = Field(5, ge=0)
    min_delta: float = Field(0.0, ge=0.0)
    mode: Literal["auto", "min", "max"] = "auto"
    restore_best_weights: bool = False


class LearningRateReductionConfig(BaseModel):
    usage: bool = False
    monitor: str = Field("val_loss", pattern=_SAFE_TEXT)
    factor: float = Field(0.1, gt=0.0, lt=1.0)
    patience: int = Field(10, ge=0)
    min_lr: float = Field(0.0, ge=0.0)


class Config(BaseModel):
    optimizer: str = Field("Adam", pattern=r"^[A-Za-z][A-Za-z0-9_]*$")
    learning_rate: float = Field(0.001, gt=0.0)
    loss: str = Field("categorical_crossentropy", pattern=_SAFE_TEXT)
    metrics: list[Annotated[str, Field(pattern=_SAFE_TEXT)]] = Field(
        default_factory=lambda: ["accuracy"]
    )
    batch_size: int = Field(32, ge=1)
    epochs: int = Field(10, ge=1)
    early_stopping: EarlyStoppingConfig = Field(default_factory=EarlyStoppingConfig)
    learning_rate_reduction: LearningRateReductionConfig = Field(
        default_factory=LearningRateReductionConfig
    )


class Train(BaseModel):
    """Reduced view of a project sent to the remote trainer."""

    config: Config
    dataset: Any = None
    user_id: str = Field(..., serialization_alias="id")


class Project(BaseModel):
    model_config = {"frozen": True}

    user_id: str
    config: Config
    dataset: Any = None
    content: Content

    def train_body(self) -> Train:
        return Train(config=self.config, dataset=self.dataset, user_id=self.user_id)
