"""Error definitions for lumpgen."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_PARSE = "E_PARSE"
E_SCHEMA = "E_SCHEMA"
E_MISSING_MATERIAL = "E_MISSING_MATERIAL"
E_MISSING_PATCH = "E_MISSING_PATCH"
E_CAPACITY = "E_CAPACITY"
E_NAME_COLLISION = "E_NAME_COLLISION"
E_IO = "E_IO"
E_LUMP_FORMAT = "E_LUMP_FORMAT"
E_INTERNAL = "E_INTERNAL"


@dataclass
class LumpGenError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class SpecificationError(LumpGenError):
    pass


class ResolutionError(LumpGenError):
    pass


class CapacityError(LumpGenError):
    pass


class NameCollisionError(LumpGenError):
    pass


class AssetIOError(LumpGenError):
    pass


class LumpFormatError(LumpGenError):
    pass


def spec_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> SpecificationError:
    return SpecificationError(code=code, message=message, context=context)


def missing_material(name: str, referrer: str) -> ResolutionError:
    return ResolutionError(
        code=E_MISSING_MATERIAL,
        message=f"{referrer}: cannot find material with name {name}",
        context={"name": name, "referrer": referrer},
    )


def missing_patch(name: str, referrer: str) -> ResolutionError:
    return ResolutionError(
        code=E_MISSING_PATCH,
        message=f"{referrer}: cannot find patch with name {name}",
        context={"name": name, "referrer": referrer},
    )


def io_error(
    message: str, path: Any, cause: Optional[OSError] = None
) -> AssetIOError:
    ctx: Dict[str, Any] = {"path": str(path)}
    if cause is not None:
        ctx["reason"] = cause.strerror or str(cause)
    return AssetIOError(code=E_IO, message=message, context=ctx)


__all__ = [
    "LumpGenError",
    "SpecificationError",
    "ResolutionError",
    "CapacityError",
    "NameCollisionError",
    "AssetIOError",
    "LumpFormatError",
    "spec_error",
    "missing_material",
    "missing_patch",
    "io_error",
    "E_PARSE",
    "E_SCHEMA",
    "E_MISSING_MATERIAL",
    "E_MISSING_PATCH",
    "E_CAPACITY",
    "E_NAME_COLLISION",
    "E_IO",
    "E_LUMP_FORMAT",
    "E_INTERNAL",
]
