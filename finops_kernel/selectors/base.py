"""
Module: finops_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.  Selectors
    form the query side of the kernel, giving structured read access to
    users, transactions, approvals and the notification log.
Architecture position: Kernel > Selectors.  May import from db/, domain/ and
    models/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors MUST NOT call session.add(),
      session.delete(), session.commit(), or session.flush().
    - DTO return convention: selectors return frozen dataclasses, never
      ORM instances.
    - Session ownership: the caller owns the session and its snapshot.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Guarantees:
        - session is stored as a public attribute for subclass query use.
        - No commit, flush, add, or delete operations are performed.
    """

    def __init__(self, session: Session):
        self.session = session
