"""
Risk engine exceptions.
"""


class RiskEngineError(Exception):
    """Base class for risk engine failures."""


class ClientNotFoundError(RiskEngineError):
    """The designated client id is not present in the node collection."""

    def __init__(self, client_id: str):
        self.client_id = client_id
        super().__init__(f'Client ID "{client_id}" not found in the graph.')
