"""Automatic supply of LazyMessage handles to components.

Component types declare where they need a message handle (an Injection
Point) either with markers or with an explicit declaration:

    class CategoryService:
        # attribute
        duplicate_title: Annotated[LazyMessage, message_key("problem.duplicate-category.title")]

        # initializer parameter
        def __init__(
            self,
            repo,
            not_found: Annotated[LazyMessage, message_key("problem.resource-not-found.title")],
        ):
            ...

        # setter parameter
        @message_setter("problem.validation-failed.detail")
        def set_validation_detail(self, detail: LazyMessage) -> None:
            ...

    # types that cannot carry markers
    scanner.declare(ThirdPartyWidget).attribute("label", "widget.label")

The scanner discovers Injection Points once per type (cached) and supplies a
fresh LazyMessage for each point on every instance it creates or injects.
Marker problems (blank keys, carrier types that cannot hold a handle) raise
BindingConfigurationError at scan time.
"""

import dataclasses
import inspect
import threading
import types
from dataclasses import dataclass
from enum import Enum
from typing import (
    Annotated,
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from phrasebook.i18n.exceptions import BindingConfigurationError
from phrasebook.i18n.lazy import LazyMessage, Renderable
from phrasebook.i18n.resolver import MessageResolver
from phrasebook.logging import get_module_logger

logger = get_module_logger()

C = TypeVar("C")

SETTER_MARKER_ATTR = "__message_key__"


@dataclass(frozen=True)
class MessageKeyMarker:
    """Metadata marker declaring one Injection Point bound to a key."""

    key: str

    def __post_init__(self):
        if not isinstance(self.key, str) or not self.key.strip():
            raise BindingConfigurationError(
                f"message key must be a non-blank string, got {self.key!r}"
            )


def message_key(key: str) -> MessageKeyMarker:
    """Marker for ``Annotated`` attributes and initializer parameters."""
    return MessageKeyMarker(key)


def message_setter(key: str) -> Callable[[Callable], Callable]:
    """Mark a one-argument method as a setter receiving a LazyMessage."""
    marker = MessageKeyMarker(key)

    def decorator(fn: Callable) -> Callable:
        setattr(fn, SETTER_MARKER_ATTR, marker)
        return fn

    return decorator


class InjectionKind(str, Enum):
    ATTRIBUTE = "attribute"
    INIT_PARAM = "init_param"
    SETTER = "setter"


@dataclass(frozen=True)
class InjectionPoint:
    """One member of a component type that receives a LazyMessage.

    Attributes:
        owner: Type that declares the member (may be an ancestor).
        member: Attribute, parameter or setter method name.
        kind: How the handle is supplied.
        carrier: Declared type of the member.
        key: Message key the handle is bound to.
    """

    owner: type
    member: str
    kind: InjectionKind
    carrier: Any
    key: str


def is_renderable_carrier(carrier: Any) -> bool:
    """Check whether a declared type can hold a LazyMessage.

    Accepts LazyMessage (or a subclass), Renderable, and Optional forms of
    those.
    """
    origin = get_origin(carrier)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(carrier) if arg is not type(None)]
        return bool(members) and all(is_renderable_carrier(arg) for arg in members)
    if carrier is Renderable:
        return True
    return isinstance(carrier, type) and issubclass(carrier, LazyMessage)


def _split_marker(hint: Any) -> Tuple[Optional[MessageKeyMarker], Any]:
    if get_origin(hint) is not Annotated:
        return None, hint
    base, *metadata = get_args(hint)
    markers = [item for item in metadata if isinstance(item, MessageKeyMarker)]
    if len(markers) > 1:
        raise BindingConfigurationError(
            f"multiple message keys declared: {[m.key for m in markers]}"
        )
    return (markers[0] if markers else None), base


def _mentions_marker(raw_annotations: Dict[str, Any]) -> bool:
    for value in raw_annotations.values():
        if isinstance(value, str) and ("message_key" in value or "MessageKeyMarker" in value):
            return True
        if get_origin(value) is Annotated and any(
            isinstance(item, MessageKeyMarker) for item in get_args(value)[1:]
        ):
            return True
    return False


def _type_hints(target: Any, owner: type) -> Dict[str, Any]:
    """Resolve annotations, failing only if an unresolvable one could be a marker."""
    try:
        return get_type_hints(target, include_extras=True)
    except (NameError, TypeError) as e:
        raw = inspect.get_annotations(target)
        if _mentions_marker(raw):
            raise BindingConfigurationError(
                f"cannot resolve annotations: {e}", owner=owner, member=getattr(target, "__name__", "")
            ) from e
        return {}


def _init_parameter_names(component_type: type) -> List[str]:
    try:
        signature = inspect.signature(component_type)
    except (ValueError, TypeError):
        return []
    return [
        name
        for name, param in signature.parameters.items()
        if param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]


def _init_owner(component_type: type) -> type:
    for klass in component_type.__mro__:
        if "__init__" in vars(klass):
            return klass
    return component_type


def _initializer_chain(component_type: type) -> Iterator[Tuple[type, Callable]]:
    """Yield ``(owner, __init__)`` for the initializers a call reaches.

    Starts at the nearest ``__init__`` and keeps walking the MRO while the
    current one accepts ``*args`` or ``**kwargs``, since those forward
    arguments to an ancestor initializer.
    """
    for klass in component_type.__mro__:
        init_fn = vars(klass).get("__init__")
        if init_fn is None:
            continue
        if klass is object or not inspect.isfunction(init_fn):
            return
        yield klass, init_fn
        kinds = {param.kind for param in inspect.signature(init_fn).parameters.values()}
        if not kinds & {inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD}:
            return


class BindingDeclaration:
    """Builder for explicit Injection Point declarations.

    Example:
        scanner.declare(Widget).attribute("label", "widget.label").setter(
            "set_tooltip", "widget.tooltip"
        )
    """

    def __init__(self, scanner: "BindingScanner", component_type: type):
        self._scanner = scanner
        self.component_type = component_type

    def attribute(self, name: str, key: str) -> "BindingDeclaration":
        self._scanner._add_declaration(self.component_type, name, InjectionKind.ATTRIBUTE, key)
        return self

    def init_param(self, name: str, key: str) -> "BindingDeclaration":
        self._scanner._add_declaration(self.component_type, name, InjectionKind.INIT_PARAM, key)
        return self

    def setter(self, name: str, key: str) -> "BindingDeclaration":
        self._scanner._add_declaration(self.component_type, name, InjectionKind.SETTER, key)
        return self


class BindingScanner:
    """Discovers Injection Points per type and supplies LazyMessage handles.

    Attributes:
        resolver: MessageResolver the created handles render through.
    """

    def __init__(self, resolver: MessageResolver):
        self.resolver = resolver
        self._lock = threading.RLock()
        self._cache: Dict[type, Tuple[InjectionPoint, ...]] = {}
        self._declared: Dict[type, Dict[str, Tuple[InjectionKind, str]]] = {}

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def declare(self, component_type: type) -> BindingDeclaration:
        """Start an explicit declaration for a component type."""
        return BindingDeclaration(self, component_type)

    def _add_declaration(self, component_type: type, name: str, kind: InjectionKind, key: str) -> None:
        marker = MessageKeyMarker(key)
        with self._lock:
            self._declared.setdefault(component_type, {})[name] = (kind, marker.key)
            # Subclasses inherit declarations, so every cached scan may be stale
            self._cache.clear()

    def component(self, component_type: type) -> type:
        """Class decorator scanning eagerly, so misconfiguration fails at import."""
        self.scan(component_type)
        return component_type

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def scan(self, component_type: type) -> Tuple[InjectionPoint, ...]:
        """Return the Injection Points of a type, scanning it on first use.

        Ancestors are scanned before subclasses, members in declaration order,
        so the result is stable across runs.

        Raises:
            BindingConfigurationError: On a blank key or a member whose carrier
                type cannot hold a LazyMessage.
        """
        cached = self._cache.get(component_type)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._cache.get(component_type)
            if cached is not None:
                return cached
            points = tuple(self._discover(component_type))
            self._cache[component_type] = points

        logger.debug(
            "scanned_component",
            component=component_type.__qualname__,
            injection_points=[f"{p.kind.value}:{p.member}" for p in points],
        )
        return points

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _discover(self, component_type: type) -> List[InjectionPoint]:
        init_params = set(_init_parameter_names(component_type))
        points: Dict[str, InjectionPoint] = {}

        for klass in reversed(component_type.__mro__):
            if klass is object:
                continue

            own_annotations = inspect.get_annotations(klass)
            if own_annotations:
                hints = _type_hints(klass, klass)
                for name in own_annotations:
                    marker, carrier = _split_marker(hints.get(name))
                    if marker is None:
                        continue
                    kind = InjectionKind.INIT_PARAM if name in init_params else InjectionKind.ATTRIBUTE
                    points[name] = self._point(klass, name, kind, carrier, marker.key)

            for name, value in vars(klass).items():
                marker = getattr(value, SETTER_MARKER_ATTR, None)
                if marker is None:
                    marker = getattr(getattr(value, "__func__", None), SETTER_MARKER_ATTR, None)
                if not isinstance(marker, MessageKeyMarker):
                    continue
                carrier = self._setter_carrier(klass, name, value)
                points[name] = self._point(klass, name, InjectionKind.SETTER, carrier, marker.key)

            for name, (kind, key) in self._declared.get(klass, {}).items():
                carrier = self._declared_carrier(component_type, klass, name, kind, init_params)
                points[name] = self._point(klass, name, kind, carrier, key)

        if not dataclasses.is_dataclass(component_type):
            points.update(self._init_markers(component_type, points))

        return list(points.values())

    def _init_markers(self, component_type: type, known: Dict[str, InjectionPoint]) -> Dict[str, InjectionPoint]:
        found: Dict[str, InjectionPoint] = {}
        forwarded = False
        # Forwarded parameters are supplied by keyword, so every initializer
        # in between must accept **kwargs
        keywords_reach = True

        for owner, init_fn in _initializer_chain(component_type):
            hints = _type_hints(init_fn, owner)
            parameters = inspect.signature(init_fn).parameters.values()
            for param in parameters:
                if param.name in known or param.name in found:
                    continue
                marker, carrier = _split_marker(hints.get(param.name))
                if marker is None:
                    continue
                if forwarded and (
                    not keywords_reach or param.kind is inspect.Parameter.POSITIONAL_ONLY
                ):
                    raise BindingConfigurationError(
                        f"parameter is hidden behind the forwarding initializer of "
                        f"{component_type.__qualname__} and cannot be passed by keyword",
                        owner=owner,
                        member=param.name,
                    )
                found[param.name] = self._point(
                    owner, param.name, InjectionKind.INIT_PARAM, carrier, marker.key
                )

            forwarded = True
            keywords_reach = keywords_reach and any(
                param.kind is inspect.Parameter.VAR_KEYWORD for param in parameters
            )
        return found

    def _setter_carrier(self, owner: type, name: str, value: Any) -> Any:
        if not inspect.isfunction(value):
            raise BindingConfigurationError(
                "message_setter must decorate an instance method", owner=owner, member=name
            )

        params = list(inspect.signature(value).parameters.values())[1:]
        required = [p for p in params if p.default is inspect.Parameter.empty and p.kind not in (
            inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)]
        if not params or len(required) > 1 or params[0].kind in (
            inspect.Parameter.KEYWORD_ONLY, inspect.Parameter.VAR_KEYWORD
        ):
            raise BindingConfigurationError(
                "setter must accept exactly one positional argument", owner=owner, member=name
            )

        hint = _type_hints(value, owner).get(params[0].name)
        _, carrier = _split_marker(hint)
        return carrier

    def _declared_carrier(
        self,
        component_type: type,
        owner: type,
        name: str,
        kind: InjectionKind,
        init_params: set,
    ) -> Any:
        if kind is InjectionKind.SETTER:
            method = getattr(component_type, name, None)
            if method is None:
                raise BindingConfigurationError("no such setter", owner=owner, member=name)
            return self._setter_carrier(owner, name, method)

        if kind is InjectionKind.INIT_PARAM:
            if name not in init_params:
                raise BindingConfigurationError(
                    "not an initializer parameter", owner=owner, member=name
                )
            init_owner = _init_owner(component_type)
            init_fn = vars(init_owner).get("__init__")
            hints = _type_hints(init_fn, init_owner) if inspect.isfunction(init_fn) else {}
            if name not in hints:
                hints = _type_hints(component_type, owner)
            return _split_marker(hints.get(name))[1]

        return _split_marker(_type_hints(component_type, owner).get(name))[1]

    def _point(self, owner: type, name: str, kind: InjectionKind, carrier: Any, key: str) -> InjectionPoint:
        if carrier is None:
            raise BindingConfigurationError(
                f"{kind.value} has no declared carrier type", owner=owner, member=name
            )
        if not is_renderable_carrier(carrier):
            raise BindingConfigurationError(
                f"carrier type {carrier!r} cannot hold a LazyMessage", owner=owner, member=name
            )
        return InjectionPoint(owner=owner, member=name, kind=kind, carrier=carrier, key=key)

    # ------------------------------------------------------------------
    # Supplying handles
    # ------------------------------------------------------------------

    def create(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Construct a component with every Injection Point supplied.

        Initializer parameters the caller already passed are left alone.
        Positional-only parameters are appended after the caller's
        positional arguments, all others are passed by keyword. Parameters
        an ancestor initializer receives through ``**kwargs`` count as
        passed only when the caller gave them by keyword.
        Attributes are assigned and setters called after construction.
        """
        points = self.scan(component_type)
        init_points = {p.member: p for p in points if p.kind is InjectionKind.INIT_PARAM}
        if init_points:
            signature = inspect.signature(component_type)
            bound = signature.bind_partial(*args, **kwargs).arguments
            args = args + tuple(self._positional_handles(signature, init_points, len(args)))
            for point in init_points.values():
                parameter = signature.parameters.get(point.member)
                if parameter is not None and parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                    continue
                supplied = point.member in bound if parameter is not None else point.member in kwargs
                if not supplied:
                    kwargs[point.member] = self.resolver.lazy(point.key)

        instance = component_type(*args, **kwargs)
        self._apply(instance, points)
        return instance

    def _positional_handles(
        self,
        signature: inspect.Signature,
        init_points: Dict[str, InjectionPoint],
        given: int,
    ) -> List[Any]:
        """Values filling positional-only slots up to the last marked one."""
        positional = [
            p for p in signature.parameters.values() if p.kind is inspect.Parameter.POSITIONAL_ONLY
        ][given:]
        marked = [i for i, p in enumerate(positional) if p.name in init_points]
        if not marked:
            return []

        values = []
        for param in positional[: marked[-1] + 1]:
            if param.name in init_points:
                values.append(self.resolver.lazy(init_points[param.name].key))
            elif param.default is not inspect.Parameter.empty:
                values.append(param.default)
            else:
                # A required slot the caller left open; the constructor reports it
                break
        return values

    def inject(self, instance: C) -> C:
        """Supply attributes and setters of an already constructed component."""
        self._apply(instance, self.scan(type(instance)))
        return instance

    def _apply(self, instance: Any, points: Tuple[InjectionPoint, ...]) -> None:
        for point in points:
            if point.kind is InjectionKind.ATTRIBUTE:
                setattr(instance, point.member, self.resolver.lazy(point.key))
            elif point.kind is InjectionKind.SETTER:
                getattr(instance, point.member)(self.resolver.lazy(point.key))
