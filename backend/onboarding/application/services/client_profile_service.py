"""Application service (use case) for reading a client's onboarding profile."""

from onboarding.application.interfaces import ClientRepository
from onboarding.application.schemas.wizard_steps import parse_identifier
from onboarding.domain.entities import ClientProfile
from onboarding.domain.exceptions import EntityNotFoundError


class ClientProfileService:
    """Reads the assembled profile. Depends on the repository port (DI)."""

    def __init__(self, repository: ClientRepository):
        self._repository = repository

    async def get_client(self, client_id: int | str) -> ClientProfile:
        client_pk = parse_identifier(client_id)
        profile = await self._repository.get_profile(client_pk)
        if profile is None:
            raise EntityNotFoundError("Client", client_pk)
        return profile
