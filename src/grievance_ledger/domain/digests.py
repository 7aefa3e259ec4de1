"""
Digest engine.

Purpose:
- deterministic 32-byte keccak-256 digests written to the ledger instead of raw PII
- field order and "|" separators of the location digests are part of the
  on-ledger contract: changing them requires bumping DIGEST_SCHEMA_VERSION
"""

from __future__ import annotations

from dataclasses import dataclass

from web3 import Web3

from .records import ComplaintRecord, Location, UserRecord

DIGEST_SCHEMA_VERSION = "v1"
DIGEST_SIZE = 32
ZERO_DIGEST = b"\x00" * DIGEST_SIZE
LOCATION_SEPARATOR = "|"


def keccak_text(value: str) -> bytes:
    """
    keccak256(utf8(value)).
    """
    return bytes(Web3.keccak(text=value))


def user_location_digest(location: Location) -> bytes:
    parts = [location.pin, location.district, location.city, location.state, location.municipal]
    return keccak_text(LOCATION_SEPARATOR.join(parts))


def complaint_location_digest(location: Location) -> bytes:
    parts = [location.pin, location.district, location.city, location.locality, location.state]
    return keccak_text(LOCATION_SEPARATOR.join(parts))


def attachment_digest(attachment_url: str) -> bytes:
    return keccak_text(attachment_url) if attachment_url else ZERO_DIGEST


@dataclass(frozen=True)
class UserDigests:
    email: bytes
    national_id: bytes
    location: bytes


@dataclass(frozen=True)
class ComplaintDigests:
    description: bytes
    attachment: bytes
    location: bytes


def user_digests(record: UserRecord) -> UserDigests:
    return UserDigests(
        email=keccak_text(record.email),
        national_id=keccak_text(record.national_id_or_sentinel),
        location=user_location_digest(record.location),
    )


def complaint_digests(record: ComplaintRecord) -> ComplaintDigests:
    """
    Expects a record that already went through ComplaintRecord.from_payload,
    i.e. with the state default applied.
    """
    return ComplaintDigests(
        description=keccak_text(record.description),
        attachment=attachment_digest(record.attachment_url),
        location=complaint_location_digest(record.location),
    )
