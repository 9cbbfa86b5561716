"""Identity loading and alias resolution for Alice and Bob."""

import json
from pathlib import Path

from ..logging_config import get_logger
from ..messaging import DEFAULT_MEDIATOR_DID, IMessagingClient, MessagingError
from ..models import IdentityInfo, Participant

logger = get_logger(__name__)

# environments.json profile key -> alias used by the API
PROFILE_NAMES = {"Alice": "alice", "Bob": "bob"}

LOOPBACK_IDENTITIES = {
    "alice": IdentityInfo(
        alias="Alice", did="did:peer:2.demo-alice", mediator_did=DEFAULT_MEDIATOR_DID
    ),
    "bob": IdentityInfo(
        alias="Bob", did="did:peer:2.demo-bob", mediator_did=DEFAULT_MEDIATOR_DID
    ),
}


class IdentityConfigError(Exception):
    """environments.json exists but cannot be used."""


def load_identities(path: Path, environment_name: str) -> dict[str, IdentityInfo]:
    """
    Read Alice and Bob from an environments.json file.

    The file maps environment names to ``{"profiles": {"Alice": {...},
    "Bob": {...}}}`` where each profile has ``did`` and ``mediator``.
    A missing file or environment falls back to the loopback identities.
    """
    if not path.exists():
        logger.info("No %s, using loopback identities", path.name)
        return dict(LOOPBACK_IDENTITIES)

    try:
        environments = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise IdentityConfigError(f"Cannot read {path}: {e}") from e

    environment = environments.get(environment_name)
    if environment is None:
        logger.info(
            "Environment '%s' not in %s, using loopback identities",
            environment_name,
            path.name,
        )
        return dict(LOOPBACK_IDENTITIES)

    profiles = environment.get("profiles", {})
    identities: dict[str, IdentityInfo] = {}
    for profile_name, alias in PROFILE_NAMES.items():
        profile = profiles.get(profile_name)
        if not profile or not profile.get("did"):
            raise IdentityConfigError(
                f"{profile_name} not found in environment '{environment_name}'"
            )
        identities[alias] = IdentityInfo(
            alias=profile_name,
            did=profile["did"],
            mediator_did=profile.get("mediator") or None,
        )
    return identities


class IdentityRegistry:
    """Alias -> Participant lookup for exactly two parties."""

    def __init__(self, participants: dict[str, Participant]):
        self._participants = {alias.lower(): p for alias, p in participants.items()}

    @classmethod
    async def bootstrap(
        cls, client: IMessagingClient, identities: dict[str, IdentityInfo]
    ) -> "IdentityRegistry":
        """Register profiles, allow both parties (self included), enable live streams."""
        participants: dict[str, Participant] = {}
        for alias, info in identities.items():
            profile = await client.add_profile(info.alias, info.did, info.mediator_did)
            participants[alias] = Participant(info=info, profile=profile)
            logger.info("%s profile active: %s", info.alias, info.did)

        for participant in participants.values():
            for other in participants.values():
                await client.allow(participant.profile, other.did)

        for participant in participants.values():
            try:
                await client.enable_live_stream(participant.profile)
                logger.info("Live stream enabled for %s", participant.info.alias)
            except MessagingError as e:
                logger.error("Failed to enable live stream for %s: %s", participant.info.alias, e)

        return cls(participants)

    def get(self, alias: str) -> Participant | None:
        """Case-insensitive lookup. None for unknown aliases."""
        return self._participants.get(alias.strip().lower())

    def aliases(self) -> list[str]:
        return list(self._participants)

    def identities(self) -> dict[str, IdentityInfo]:
        return {alias: p.info for alias, p in self._participants.items()}
