"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Client, Invoice, Job, User
from ...policies import visible_clients


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, user: User, owner_id: Optional[str] = None) -> list[Client]:
        """Clients visible to the user, ordered by name"""
        query = visible_clients(db.query(Client), user)
        if owner_id:
            query = query.filter(Client.created_by == owner_id)
        return query.order_by(Client.name.asc()).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: int, user: User) -> Optional[Client]:
        """Get a specific client by ID"""
        return visible_clients(db.query(Client), user).filter(Client.id == client_id).first()

    @staticmethod
    def create_client(db: Session, user_id: str, **client_data) -> Client:
        """Create a new client"""
        client = Client(created_by=user_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> None:
        """Delete a client"""
        db.delete(client)
        db.commit()

    @staticmethod
    def count_references(db: Session, client_id: int) -> tuple[int, int]:
        """(jobs, invoices) still pointing at the client"""
        jobs = db.query(Job).filter(Job.client_id == client_id).count()
        invoices = db.query(Invoice).filter(Invoice.client_id == client_id).count()
        return jobs, invoices
