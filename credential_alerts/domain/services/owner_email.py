"""Owner e-mail normalization strategies."""

from typing import Protocol


class EmailNormalizer(Protocol):
    """Turns a raw directory mail attribute into a deliverable address."""

    def __call__(self, raw: str | None) -> str | None: ...


def keep_address(raw: str | None) -> str | None:
    """Return the address trimmed, or None when blank."""
    if raw is None:
        return None
    return raw.strip() or None


def strip_mailbox_prefix(raw: str | None) -> str | None:
    """
    Drop a delegated-mailbox prefix separated by the first underscore.

    ``"svc_owner1@example.com"`` becomes ``"owner1@example.com"``. Only the
    local part is inspected; underscores in the domain are left alone.
    """
    address = keep_address(raw)
    if address is None:
        return None
    local, at, domain = address.partition("@")
    if "_" not in local:
        return address
    local = local.split("_", 1)[1]
    if not local:
        return None
    return f"{local}{at}{domain}"
