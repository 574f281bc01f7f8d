from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Protocol, cast, get_type_hints


logger = logging.getLogger(__name__)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def is_protocol(tp: object) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def is_protocol(tp: object) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        return (
            inspect.isclass(tp)
            and issubclass(tp, cast("type", Protocol))
            and bool(getattr(tp, "_is_protocol", False))
        )


def is_runtime_checkable_protocol(tp: type) -> bool:
    if not is_protocol(tp):
        return False

    try:
        isinstance(None, tp)
    except TypeError:
        return False
    else:
        return True


def validate_impl(capability: type, impl: type) -> None:
    """Validate that the class 'impl' provides 'capability'.

    - For normal classes/ABCs: require issubclass(impl, capability).
    - For Protocols: nominal via MRO, otherwise structural conformance.

    Raise ValueError when a non-type capability is passed.
    """
    if not inspect.isclass(capability):
        msg = f"Capability must be a class or protocol, got {capability!r}"
        raise ValueError(msg)

    if not is_protocol(capability):
        if not issubclass(impl, capability):
            msg = f"Implementation {impl.__name__} must be a subclass of {capability.__name__}"
            raise TypeError(msg)
        return

    validate_protocol_impl(capability, impl)


def validate_instance(capability: type, instance: object) -> None:
    """Check a created object against 'capability' at creation time."""
    if not is_protocol(capability):
        if not isinstance(instance, capability):
            msg = f"Created instance {type(instance).__name__} is not an instance of {capability.__name__}"
            raise TypeError(msg)
        return

    try:
        validate_protocol_impl(capability, type(instance))
    except TypeError as e:
        msg = f"Created instance {type(instance).__name__} does not conform to protocol {capability.__name__}"
        raise TypeError(msg) from e

    if is_runtime_checkable_protocol(capability) and not isinstance(instance, capability):
        msg = f"Created instance {type(instance).__name__} does not implement runtime protocol {capability.__name__}"
        raise TypeError(msg)


def validate_protocol_impl(proto_cls: type, impl: type) -> None:
    if proto_cls in getattr(impl, "__mro__", ()):
        return

    _validate_structural_conformance(proto_cls, impl)


def _validate_structural_conformance(proto_cls: type, impl: type) -> None:  # noqa: C901
    """Best-effort structural conformance: presence + basic callable arity + return type checks."""
    missing: list[str] = []
    signature_mismatches: list[str] = []

    try:
        proto_hints = get_type_hints(proto_cls, include_extras=True)
    except (TypeError, NameError):
        proto_hints = getattr(proto_cls, "__annotations__", {})

    # Attributes required by annotations
    for name in proto_hints:
        if name.startswith("_"):
            continue
        if not hasattr(impl, name):
            missing.append(name)

    for name, proto_attr in proto_cls.__dict__.items():
        if name.startswith("_") or not inspect.isfunction(proto_attr):
            continue

        if not hasattr(impl, name):
            missing.append(name)
            continue

        impl_attr = getattr(impl, name)
        if not callable(impl_attr):
            signature_mismatches.append(f"{name}: not Callable on {impl.__name__}")
            continue

        try:
            proto_sig = _signature(proto_attr)
            impl_sig = _signature(impl_attr)

            proto_params = [p for p in proto_sig.parameters.values() if p.name != "self"]
            impl_params = [p for p in impl_sig.parameters.values() if p.name != "self"]

            if _positional_arity(impl_params) < _positional_arity(proto_params):
                signature_mismatches.append(
                    f"{name}: impl has fewer required positional params "
                    f"({_positional_arity(impl_params)}) than protocol "
                    f"({_positional_arity(proto_params)})"
                )

            proto_ret = proto_sig.return_annotation
            impl_ret = impl_sig.return_annotation

            if (
                proto_ret is not inspect.Signature.empty
                and impl_ret is not inspect.Signature.empty
                and proto_ret is not Any
                and impl_ret is not Any
            ):
                if not _is_return_type_compatible(impl_ret, proto_ret):
                    signature_mismatches.append(
                        f"{name}: return type {impl_ret!r} is not compatible with "
                        f"protocol return type {proto_ret!r}"
                    )

        except Exception as e:  # noqa: BLE001
            signature_mismatches.append(f"{name}: unable to compare signatures ({e})")

    if missing or signature_mismatches:
        msgs = []
        if missing:
            msgs.append(f"missing members: {', '.join(missing)}")
        if signature_mismatches:
            msgs.append(f"signature mismatches: {', '.join(signature_mismatches)}")

        msg = (
            f"Implementation {impl.__name__} does not structurally conform to protocol "
            f"{proto_cls.__name__}: {'; '.join(msgs)}"
        )
        raise TypeError(msg)


def _signature(func: Any) -> inspect.Signature:
    # Stringified annotations (PEP 563) are evaluated so both sides compare as real types.
    try:
        return inspect.signature(func, eval_str=True)
    except NameError as exc:
        logger.warning("'%s' name error evaluating annotations of %s", exc.name, getattr(func, "__qualname__", func))
        return inspect.signature(func)


def _positional_arity(params: list[inspect.Parameter]) -> int:
    return sum(
        1
        for p in params
        if p.kind
        in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )
        and p.default is inspect.Parameter.empty
    )


def _is_return_type_compatible(impl_ret: object, proto_ret: object) -> bool:
    # Exact match
    if impl_ret == proto_ret:
        return True

    # Handle class-based covariance
    if isinstance(impl_ret, type) and isinstance(proto_ret, type):
        return issubclass(impl_ret, proto_ret)

    # Everything else (Union, Protocol, TypeVar, etc.) -> conservative failure
    return False
