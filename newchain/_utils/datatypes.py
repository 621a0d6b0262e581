from typing import (
    Any,
    Type,
    TypeVar,
    cast,
)

from newchain.abc import (
    ConfigurableAPI,
)

T = TypeVar("T")


class Configurable(ConfigurableAPI):
    """
    Base class for simple inline subclassing
    """

    @classmethod
    def configure(cls: Type[T], __name__: str = None, **overrides: Any) -> Type[T]:
        if __name__ is None:
            __name__ = cls.__name__

        for key in overrides:
            if not hasattr(cls, key):
                raise TypeError(
                    f"The {cls.__name__}.configure cannot set attributes that are not "
                    f"already present on the base class. The attribute `{key}` was "
                    f"not found on the base class `{cls.__name__}`"
                )
        return cast(Type[T], type(__name__, (cls,), overrides))
