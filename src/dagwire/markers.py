from typing import TYPE_CHECKING, Annotated, Any, NamedTuple, TypeVar, Union, get_args, get_origin

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2


class Qualifier(NamedTuple):
    """Differentiate multiple bindings for the same base type.

    Attach ``Qualifier`` metadata to ``typing.Annotated`` so dagwire treats each
    annotated key as distinct.

    Examples:
        .. code-block:: python

            from typing import Annotated, TypeAlias


            class Decorator: ...


            HiDecorator: TypeAlias = Annotated[Decorator, Qualifier("Decorator1")]
            ByeDecorator: TypeAlias = Annotated[Decorator, Qualifier("Decorator2")]

    """

    value: Any


class InjectedMarker:
    """A marker used to indicate a class attribute should be injected after construction."""


if TYPE_CHECKING:
    Injected = Union[T, T]  # noqa: UP007,PYI016
    """Mark a class attribute for field injection.

    At runtime ``Injected[T]`` becomes ``Annotated[T, InjectedMarker()]``.

    Examples:
        .. code-block:: python

            class MainClass:
                hi_decorator: Injected[Annotated[Decorator, Qualifier("Decorator1")]]
    """

else:

    class Injected:
        """Mark a class attribute for field injection.

        At runtime ``Injected[T]`` resolves to ``Annotated[T, InjectedMarker()]``.
        Qualifiers already attached to ``T`` are preserved.

        Examples:
            .. code-block:: python

                class MainClass:
                    hi_decorator: Injected[Annotated[Decorator, Qualifier("Decorator1")]]

        """

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectedMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                inner = args[0]
                metadata = args[1:]
                return _build_annotated((inner, *metadata, InjectedMarker()))
            return _build_annotated((item, InjectedMarker()))


def is_injected_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., InjectedMarker()]."""
    return any(isinstance(item, InjectedMarker) for item in _annotated_metadata(annotation))


def strip_injected_annotation(annotation: Any) -> Any:
    """Strip the Injected marker while preserving qualifier metadata."""
    if not is_injected_annotation(annotation):
        return annotation

    annotation_args = get_args(annotation)
    parameter_type = annotation_args[0]
    metadata = annotation_args[1:]
    filtered_metadata = tuple(item for item in metadata if not isinstance(item, InjectedMarker))
    if not filtered_metadata:
        return parameter_type
    return _build_annotated((parameter_type, *filtered_metadata))


def extract_qualifier(annotation: Any) -> Qualifier | None:
    """Return the last Qualifier attached to an Annotated token, if any."""
    qualifiers = [item for item in _annotated_metadata(annotation) if isinstance(item, Qualifier)]
    if not qualifiers:
        return None
    return qualifiers[-1]


def _annotated_metadata(annotation: Any) -> tuple[Any, ...]:
    if get_origin(annotation) is not Annotated:
        return ()
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return ()  # pragma: no cover - Annotated requires at least 2 args
    return annotation_args[1:]


def _build_annotated(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
