import logging
from typing import List, Optional

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseRepository
from ..models.campaign import Campaign, CampaignEmployee, CampaignRetailer, EmployeeRetailerAssignment
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class CampaignRepository(BaseRepository[Campaign]):
    """
    Campaign repository. Assignment rows are managed here too, since they
    never outlive their campaign.
    """

    def __init__(self, session: Session):
        super().__init__(Campaign, session)

    def get_campaign_retailer(self, campaign_id: str, retailer_id: str) -> Optional[CampaignRetailer]:
        return self.session.get(CampaignRetailer, (campaign_id, retailer_id))

    def get_campaign_employee(self, campaign_id: str, employee_id: str) -> Optional[CampaignEmployee]:
        return self.session.get(CampaignEmployee, (campaign_id, employee_id))

    def add_retailer(self, campaign_id: str, retailer_id: str) -> CampaignRetailer:
        link = CampaignRetailer(campaign_id=campaign_id, retailer_id=retailer_id)
        self.session.add(link)
        return link

    def add_employee(self, campaign_id: str, employee_id: str) -> CampaignEmployee:
        link = CampaignEmployee(campaign_id=campaign_id, employee_id=employee_id)
        self.session.add(link)
        return link

    def list_retailers(self, campaign_id: str) -> List[CampaignRetailer]:
        statement = select(CampaignRetailer).where(CampaignRetailer.campaign_id == campaign_id)
        return list(self.session.exec(statement).all())

    def list_employees(self, campaign_id: str) -> List[CampaignEmployee]:
        statement = (
            select(CampaignEmployee)
            .where(CampaignEmployee.campaign_id == campaign_id)
            .order_by(CampaignEmployee.assigned_at)
        )
        return list(self.session.exec(statement).all())

    def list_assignments(
        self,
        campaign_id: str,
        *,
        employee_id: Optional[str] = None,
        retailer_id: Optional[str] = None,
    ) -> List[EmployeeRetailerAssignment]:
        """List employee/retailer mappings for a campaign, oldest first."""
        try:
            statement = select(EmployeeRetailerAssignment).where(
                EmployeeRetailerAssignment.campaign_id == campaign_id
            )
            if employee_id is not None:
                statement = statement.where(EmployeeRetailerAssignment.employee_id == employee_id)
            if retailer_id is not None:
                statement = statement.where(EmployeeRetailerAssignment.retailer_id == retailer_id)
            statement = statement.order_by(EmployeeRetailerAssignment.assigned_at)
            return list(self.session.exec(statement).all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list assignments for campaign {campaign_id}: {e}")
            raise DatabaseError("Failed to list assignments", operation="list_assignments")

    def add_assignment(self, campaign_id: str, employee_id: str, retailer_id: str) -> EmployeeRetailerAssignment:
        assignment = EmployeeRetailerAssignment(
            campaign_id=campaign_id,
            employee_id=employee_id,
            retailer_id=retailer_id,
        )
        self.session.add(assignment)
        self.session.flush()
        return assignment
