"""Per-layer parameter records.

Every field holds the raw string form of a keyword argument for the generated
layer constructor. Numbers and lists in the payload are normalised to strings
so the literal formatter always sees one representation.
"""

from collections.abc import Iterator

from pydantic import BaseModel, field_validator

_FORBIDDEN_CHARS = ('"', "\\", "\n", "\r")


class LayerParam(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("*", mode="before")
    @classmethod
    def normalize(cls, value):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            if len(value) == 1:
                return f"{value[0]},"
            return ",".join(str(v) for v in value)
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("*")
    @classmethod
    def reject_unquotable(cls, value: str | None) -> str | None:
        if value is not None and any(c in value for c in _FORBIDDEN_CHARS):
            raise ValueError("parameter values cannot contain quotes, backslashes or newlines")
        return value

    def items(self) -> Iterator[tuple[str, str]]:
        """Yield populated (key, raw value) pairs in declaration order."""
        for key in type(self).model_fields:
            value = getattr(self, key)
            if value is not None:
                yield key, value


class InputParam(LayerParam):
    shape: str | None = None
    batch_size: str | None = None
    dtype: str | None = None


class Conv2DParam(LayerParam):
    filters: str | None = None
    kernel_size: str | None = None
    strides: str | None = None
    padding: str | None = None
    dilation_rate: str | None = None
    activation: str | None = None
    kernel_initializer: str | None = None


class DenseParam(LayerParam):
    units: str | None = None
    activation: str | None = None
    kernel_initializer: str | None = None


class AveragePooling2DParam(LayerParam):
    pool_size: str | None = None
    strides: str | None = None
    padding: str | None = None


class MaxPool2DParam(LayerParam):
    pool_size: str | None = None
    strides: str | None = None
    padding: str | None = None


class ActivationParam(LayerParam):
    activation: str | None = None


class DropoutParam(LayerParam):
    rate: str | None = None
    seed: str | None = None


class BatchNormalizationParam(LayerParam):
    axis: str | None = None
    momentum: str | None = None
    epsilon: str | None = None


class FlattenParam(LayerParam):
    data_format: str | None = None


PARAM_TYPES: dict[str, type[LayerParam]] = {
    "Input": InputParam,
    "Conv2D": Conv2DParam,
    "Dense": DenseParam,
    "AveragePooling2D": AveragePooling2DParam,
    "MaxPool2D": MaxPool2DParam,
    "Activation": ActivationParam,
    "Dropout": DropoutParam,
    "BatchNormalization": BatchNormalizationParam,
    "Flatten": FlattenParam,
}
