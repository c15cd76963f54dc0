from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple

REQUIRED_STR_FIELDS = ["href", "time"]
OPTIONAL_STR_FIELDS = ["description", "extended", "tags", "shared", "toread"]

NO_TITLE_PLACEHOLDER = "[no title]"


def _yes(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in ("yes", "true", "1")


def _split_tags(v: Any) -> Tuple[str, ...]:
    if isinstance(v, (list, tuple)):
        items = [str(t) for t in v]
    else:
        items = str(v or "").split()
    # Ordered set: keep first occurrence
    seen = set()
    tags = []
    for t in items:
        if t and t not in seen:
            seen.add(t)
            tags.append(t)
    return tuple(tags)


@dataclass(frozen=True)
class Record:
    """One Pinboard bookmark as returned by /v1/posts/all."""

    href: str
    time: str
    description: str = ""
    extended: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)
    shared: bool = True
    toread: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Record":
        return cls(
            href=data["href"],
            time=data["time"],
            description=data.get("description") or "",
            extended=data.get("extended") or "",
            tags=_split_tags(data.get("tags")),
            shared=_yes(data.get("shared", "yes")),
            toread=_yes(data.get("toread", "no")),
        )

    def with_title(self, title: str) -> "Record":
        return replace(self, description=title)

    def to_add_params(self) -> Dict[str, str]:
        """Query parameters for /v1/posts/add that recreate this bookmark."""
        return {
            "url": self.href,
            "description": self.description,
            "extended": self.extended,
            "tags": " ".join(self.tags),
            "dt": self.time,
            "shared": "yes" if self.shared else "no",
            "toread": "yes" if self.toread else "no",
        }


def validate_post(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Only checks what the pipeline relies on.
    """
    if not isinstance(data, dict):
        return [f"Post must be an object, got {type(data).__name__}"]

    errors: List[str] = []
    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not isinstance(data[f], str) or not data[f].strip():
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in OPTIONAL_STR_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], (str, bool, list)):
            errors.append(f"Field '{f}' must be a string if provided")

    return errors
