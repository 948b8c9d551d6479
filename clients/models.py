"""
clients/models.py -- Domain dataclass for the clients resource.

Pure data container with zero logic. Id generation and name uniqueness are
handled by clients/access.py and the database constraint in clients/store.py.
"""

from dataclasses import dataclass


@dataclass
class Client:
    """A registered client.

    client_id is generated by the service on creation and doubles as the
    ownership key: an Identity with the same client_id owns this record.
    client_name is unique across all clients.
    """

    client_id: str
    client_name: str
