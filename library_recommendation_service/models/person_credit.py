"""Cast and crew credits attached to catalog items"""
from sqlalchemy import Column, ForeignKey, Index, Integer, String

from library_recommendation_service.models.base import Base

# Person types
DIRECTOR = "Director"
ACTOR = "Actor"
WRITER = "Writer"
GUEST_STAR = "GuestStar"
PRODUCER = "Producer"


class PersonCredit(Base):
    """A person credited on an item, with the billing position in ``list_order``."""
    __tablename__ = "person_credits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(String(32), ForeignKey("catalog_items.id"), nullable=False)
    name = Column(String(255), nullable=False)
    person_type = Column(String(50), nullable=False, default=ACTOR)
    list_order = Column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_credit_item_id", "item_id"),
        Index("idx_credit_name", "name"),
    )

    def __repr__(self):
        return (
            f"<PersonCredit(item_id={self.item_id}, name='{self.name}', "
            f"type={self.person_type}, order={self.list_order})>"
        )
