"""Option model for the user commands."""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple

from .errors import UsageError


class MfaMode(str, Enum):
    """Multi-factor authentication action selected for an invocation."""

    UNSPECIFIED = "unspecified"
    ENABLE = "enable"
    DISABLE = "disable"
    RESET = "reset"

    @classmethod
    def from_flags(
        cls, enable: bool = False, disable: bool = False, reset: bool = False
    ) -> "MfaMode":
        """
        Build the mode from the three CLI switches.

        Args:
            enable: --enable was given
            disable: --disable was given
            reset: --reset was given

        Returns:
            The selected mode, or UNSPECIFIED when no switch was given

        Raises:
            UsageError: If more than one switch was given
        """
        selected = [
            mode
            for mode, flag in ((cls.ENABLE, enable), (cls.DISABLE, disable), (cls.RESET, reset))
            if flag
        ]

        if len(selected) > 1:
            flags = ", ".join(f"--{mode.value}" for mode in selected)
            raise UsageError(f"flags {flags} are mutually exclusive, specify only one")

        return selected[0] if selected else cls.UNSPECIFIED


def split_ids(value: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-joined identifier flag, keeping order and duplicates."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class UserOptions:
    """Everything a single user command invocation was given on the command line."""

    identifiers: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    sources: Tuple[str, ...] = ()
    mfa_mode: MfaMode = MfaMode.UNSPECIFIED
    role_grants: Tuple[str, ...] = ()
    role_revokes: Tuple[str, ...] = ()
    settings_file: Optional[Path] = None
    settings_patch: Any = None

    @classmethod
    def create(
        cls,
        user_id: Optional[str] = None,
        keywords: Optional[Iterable[str]] = None,
        sources: Optional[Iterable[str]] = None,
        mfa_mode: MfaMode = MfaMode.UNSPECIFIED,
        grants: Optional[Iterable[str]] = None,
        revokes: Optional[Iterable[str]] = None,
        settings_file: Optional[Path] = None,
    ) -> "UserOptions":
        """Build options from raw flag values as typer hands them over."""
        return cls(
            identifiers=split_ids(user_id),
            keywords=tuple(keywords or ()),
            sources=tuple(sources or ()),
            mfa_mode=mfa_mode,
            role_grants=tuple(grants or ()),
            role_revokes=tuple(revokes or ()),
            settings_file=settings_file,
        )

    @classmethod
    def for_single_user(cls, user_id: Optional[str], **kwargs) -> "UserOptions":
        """Build options for commands that take one id verbatim (no comma splitting)."""
        identifiers = (user_id,) if user_id and user_id.strip() else ()
        return replace(cls.create(**kwargs), identifiers=identifiers)
