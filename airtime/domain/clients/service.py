"""Client service - Business logic for client operations"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Client, User
from ...policies import ensure_can_modify, ensure_can_write
from .repository import ClientRepository
from .schemas import ClientCreate, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_clients(self, user: User, mine: bool = False) -> list[Client]:
        """Get all clients visible to a user"""
        return self.repo.get_clients(self.db, user, owner_id=user.id if mine else None)

    def get_client(self, client_id: int, user: User) -> Client:
        """Get a specific client"""
        client = self.repo.get_client_by_id(self.db, client_id, user)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def create_client(self, data: ClientCreate, user: User) -> Client:
        """Create a new client"""
        ensure_can_write(user)
        logger.info(f"📥 Creating client for user_id: {user.id}")
        try:
            return self.repo.create_client(self.db, user.id, **data.model_dump())
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Error creating client: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create client") from e

    def update_client(self, client_id: int, data: ClientUpdate, user: User) -> Client:
        """Update a client"""
        client = self.get_client(client_id, user)
        ensure_can_modify(user, client, "client")
        return self.repo.update_client(self.db, client, **data.model_dump(exclude_unset=True))

    def delete_client(self, client_id: int, user: User) -> dict:
        """Delete a client that no job or invoice refers to"""
        client = self.get_client(client_id, user)
        ensure_can_modify(user, client, "client")

        jobs, invoices = self.repo.count_references(self.db, client.id)
        if jobs or invoices:
            raise HTTPException(
                status_code=409,
                detail=f"Client still has {jobs} job(s) and {invoices} invoice(s)",
            )

        self.repo.delete_client(self.db, client)
        logger.info(f"🗑️ Client {client_id} deleted by {user.id}")
        return {"message": "Client deleted"}
