"""
CAVIS Service Layer: CavisService ABC and CavisRegistry.

Each bubble-dynamics study (laser-induced cavitation today) is a
CavisService registered with the CavisRegistry at app startup. A
service owns its request validation, the Bubble it builds from that
request, the dynamics model it injects, and its API endpoints. The
registry looks services up by id and mounts the routes of live ones.

Classes:
    CavisService  - Abstract base class for all simulation services
    CavisRegistry - Central lookup container for registered services

IMPORTANT: No unicode characters allowed (Windows charmap constraint).
"""

from abc import ABC, abstractmethod


class CavisService(ABC):
    """
    Abstract base class for a CAVIS simulation service.

    Class Attributes
    ----------------
    id : str
        Unique service identifier, also the URL namespace
        (e.g. "lic" -> /api/lic/...).
    name : str
        Human-readable display name.
    description : str
        One-liner for the service listing.
    category : str
        Grouping of the service. One of "laser", "acoustic", "hydrodynamic".
    status : str
        "live" or "coming_soon". Only live services get routes.
    model_id : str
        Id of the DynamicsModel the service injects into its bubbles.
    """

    id = ""
    name = ""
    description = ""
    category = ""
    status = "coming_soon"
    model_id = ""

    @abstractmethod
    def validate(self, config):
        """
        Validate a raw request payload and return the normalized config.

        Raises
        ------
        ValueError
            If the payload is invalid. The API answers with status 400.
        """

    @abstractmethod
    def compute(self, config):
        """
        Run the simulation for a validated config.

        Returns
        -------
        dict
            JSON-serializable result.

        Raises
        ------
        BubbleStateError, SolverError
            If the run cannot be completed. The API answers with 422.
        """

    def register_routes(self, blueprint):
        """
        Mount service-specific API endpoints onto a Flask blueprint.

        Live services override this to register endpoints under
        /api/<id>/. Coming-soon stubs inherit this no-op.
        """
        pass

    def metadata(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "status": self.status,
            "model": self.model_id,
        }


class CavisRegistry:
    """
    Central lookup container for registered CavisService instances.
    """

    def __init__(self):
        self._services = {}

    def register(self, service):
        """
        Register a service instance.

        Raises
        ------
        ValueError
            If a service with the same id is already registered.
        """
        if service.id in self._services:
            raise ValueError(
                "Service '{}' is already registered".format(service.id)
            )
        self._services[service.id] = service

    def get(self, service_id):
        """Look up a service by id; None if not found."""
        return self._services.get(service_id)

    def list_all(self):
        """Metadata for all registered services, in registration order."""
        return [s.metadata() for s in self._services.values()]

    def live(self):
        """All services with status 'live'."""
        return [s for s in self._services.values()
                if s.status == "live"]
