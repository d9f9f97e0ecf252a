"""Credential record normalization"""

from typing import Any, Dict, List, Tuple

# canonical field -> accepted source keys, in lookup order
CREDENTIAL_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "refresh_token": ("refresh_token", "refreshToken"),
    "client_id": ("client_id", "clientId"),
    "client_secret": ("client_secret", "clientSecret"),
}


def resolve_field(record: Dict[str, Any], canonical: str) -> Any:
    """Return the first truthy value among the aliases of a canonical field"""
    for key in CREDENTIAL_FIELD_ALIASES.get(canonical, (canonical,)):
        value = record.get(key)
        if value:
            return value
    return None


def normalize_credentials(record: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Resolve the alias table once for a submitted record

    Args:
        record: Raw credential record, possibly using camelCase keys

    Returns:
        Tuple of (record with canonical keys filled in, missing canonical names).
        Unknown fields such as ``profile_arn`` are passed through verbatim.
    """
    normalized = dict(record)
    missing: List[str] = []
    for canonical in CREDENTIAL_FIELD_ALIASES:
        value = resolve_field(record, canonical)
        if value:
            normalized[canonical] = value
        else:
            missing.append(canonical)
    return normalized, missing
