"""
Campaign management: creation, retailer windows, and employee/retailer mapping.
"""

from typing import Any, Dict, Optional

from sqlmodel import Session

from app.core.exceptions import BadRequestError, NotFoundError
from app.infrastructure.db.models.base import utcnow
from app.infrastructure.db.models.campaign import Campaign
from app.infrastructure.db.repositories.campaign_repository import CampaignRepository
from app.infrastructure.db.repositories.party_repository import EmployeeRepository, RetailerRepository
from app.schemas.campaign import (
    AssignmentRead,
    CampaignCreate,
    CampaignEmployeeRead,
    CampaignRead,
    CampaignRetailerRead,
    RetailerDatesUpdate,
)
from app.schemas.party import EmployeeRead, RetailerRead
from app.services.base import BaseService


class CampaignService(BaseService):
    """Service for campaign operations."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.campaigns = CampaignRepository(db_session)
        self.retailers = RetailerRepository(db_session)
        self.employees = EmployeeRepository(db_session)

    def get_service_name(self) -> str:
        return "CampaignService"

    def _get_campaign(self, campaign_id: str) -> Campaign:
        campaign = self.campaigns.get(campaign_id)
        if campaign is None:
            raise NotFoundError(resource="Campaign", resource_id=campaign_id, message="Campaign not found")
        return campaign

    def _read(self, campaign: Campaign) -> CampaignRead:
        return CampaignRead(
            id=campaign.id,
            name=campaign.name,
            description=campaign.description,
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            created_at=campaign.created_at,
            assigned_retailers=[
                CampaignRetailerRead.model_validate(link) for link in self.campaigns.list_retailers(campaign.id)
            ],
            assigned_employees=[
                CampaignEmployeeRead.model_validate(link) for link in self.campaigns.list_employees(campaign.id)
            ],
        )

    def create_campaign(self, data: CampaignCreate) -> CampaignRead:
        """
        Create a campaign with its assigned retailers and employees.

        Raises:
            BadRequestError: If any retailer or employee id is unknown
        """
        self.log_operation("create_campaign", {"name": data.name})

        retailer_ids = list(dict.fromkeys(data.retailer_ids))
        employee_ids = list(dict.fromkeys(data.employee_ids))

        known_retailers = {r.id for r in self.retailers.get_many(retailer_ids)}
        known_employees = {e.id for e in self.employees.get_many(employee_ids)}
        unknown = {
            "retailerIds": [rid for rid in retailer_ids if rid not in known_retailers],
            "employeeIds": [eid for eid in employee_ids if eid not in known_employees],
        }
        if unknown["retailerIds"] or unknown["employeeIds"]:
            raise BadRequestError("Unknown retailer or employee ids", details=unknown)

        campaign = self.campaigns.create(
            Campaign(
                name=data.name,
                description=data.description,
                start_date=data.start_date,
                end_date=data.end_date,
            )
        )
        for retailer_id in retailer_ids:
            self.campaigns.add_retailer(campaign.id, retailer_id)
        for employee_id in employee_ids:
            self.campaigns.add_employee(campaign.id, employee_id)

        self.commit("create_campaign")
        return self._read(campaign)

    def update_retailer_dates(self, campaign_id: str, retailer_id: str, data: RetailerDatesUpdate) -> Dict[str, Any]:
        """Change a retailer's participation window. Omitted dates stay as they are."""
        self._get_campaign(campaign_id)

        link = self.campaigns.get_campaign_retailer(campaign_id, retailer_id)
        if link is None:
            raise NotFoundError(resource="Retailer", message="Retailer not assigned to this campaign")

        if data.start_date:
            link.start_date = data.start_date
        if data.end_date:
            link.end_date = data.end_date
        link.updated_at = utcnow()
        self.db.add(link)
        self.commit("update_retailer_dates")

        return {
            "message": "Retailer dates updated successfully",
            "retailer": CampaignRetailerRead.model_validate(link),
        }

    def assign_employee_to_retailer(
        self,
        campaign_id: Optional[str],
        retailer_id: Optional[str],
        employee_id: Optional[str],
    ) -> Dict[str, Any]:
        """
        Map an employee to a retailer inside a campaign.

        Both must already be assigned to the campaign, and a pair can be
        mapped only once.
        """
        if not campaign_id or not retailer_id or not employee_id:
            raise BadRequestError("campaignId, retailerId and employeeId are required")

        self._get_campaign(campaign_id)

        if self.campaigns.get_campaign_retailer(campaign_id, retailer_id) is None:
            raise BadRequestError("Retailer is not assigned to this campaign")

        if self.campaigns.get_campaign_employee(campaign_id, employee_id) is None:
            raise BadRequestError("Employee is not assigned to this campaign")

        if self.campaigns.list_assignments(campaign_id, employee_id=employee_id, retailer_id=retailer_id):
            raise BadRequestError("Employee is already assigned to this retailer")

        self.campaigns.add_assignment(campaign_id, employee_id, retailer_id)
        self.commit("assign_employee_to_retailer")
        self.log_operation("assign_employee_to_retailer", {"campaign_id": campaign_id})

        return {
            "message": "Employee assigned to retailer successfully",
            "mapping": [AssignmentRead.model_validate(a) for a in self.campaigns.list_assignments(campaign_id)],
        }

    def get_employee_retailer_mapping(self, campaign_id: str) -> Dict[str, Any]:
        """Group a campaign's mappings by employee, each with its retailers."""
        self._get_campaign(campaign_id)
        assignments = self.campaigns.list_assignments(campaign_id)

        employees = {
            e.id: e for e in self.employees.get_many(list({a.employee_id for a in assignments}))
        }
        retailers = {
            r.id: r for r in self.retailers.get_many(list({a.retailer_id for a in assignments}))
        }

        grouped: Dict[str, Dict[str, Any]] = {}
        for assignment in assignments:
            employee = employees.get(assignment.employee_id)
            retailer = retailers.get(assignment.retailer_id)
            if employee is None or retailer is None:
                continue
            if employee.id not in grouped:
                grouped[employee.id] = {
                    **EmployeeRead.model_validate(employee).model_dump(by_alias=True, mode="json"),
                    "retailers": [],
                }
            grouped[employee.id]["retailers"].append({
                **RetailerRead.model_validate(retailer).model_dump(by_alias=True, mode="json"),
                "assignedAt": assignment.assigned_at.isoformat(),
            })

        return {
            "campaignId": campaign_id,
            "totalEmployees": len(grouped),
            "employees": list(grouped.values()),
        }

    def get_assigned_employee(self, campaign_id: str, retailer_id: str) -> Dict[str, Any]:
        self._get_campaign(campaign_id)
        assignments = self.campaigns.list_assignments(campaign_id, retailer_id=retailer_id)

        if not assignments:
            return {
                "campaignId": campaign_id,
                "retailerId": retailer_id,
                "isAssigned": False,
                "employee": None,
                "message": "No employee assigned to this retailer in this campaign",
            }

        mapping = assignments[0]
        employee = self.employees.get(mapping.employee_id)
        employee_data: Optional[Dict[str, Any]] = None
        if employee is not None:
            employee_data = {
                "id": employee.id,
                "name": employee.name,
                "email": employee.email,
                "contactNo": employee.contact_no,
                "position": employee.position,
            }

        return {
            "campaignId": campaign_id,
            "retailerId": retailer_id,
            "isAssigned": True,
            "employee": employee_data,
            "assignedAt": mapping.assigned_at.isoformat(),
            "message": "Employee assigned to this retailer",
        }
