"""People: look up a person or search the directory."""

from typing import List

from .base import ResourceService
from .models import Person

ME = "me"


class PeopleService(ResourceService):
    prefix = "/people"
    name = "person"

    def get(self, id: str = ME) -> Person:
        """Get a person by id; ``me`` is the authenticated user."""
        return self._get(Person, id)

    def list(self, email: str = "", display_name: str = "") -> List[Person]:
        """Search people by exact email or display-name prefix."""
        return self._list(Person, {"email": email, "displayName": display_name})
