from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.infrastructure.db.connection import get_session_dependency
from app.infrastructure.db.models.auth import User
from app.interfaces.dependencies import require_admin
from app.schemas.campaign import (
    AssignmentResponse,
    CampaignCreate,
    CampaignRead,
    EmployeeRetailerAssignRequest,
    RetailerDatesResponse,
    RetailerDatesUpdate,
)
from app.services.campaign_service import CampaignService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CampaignRead)
def create_campaign(
    payload: CampaignCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> CampaignRead:
    """Create a campaign with assigned retailers and employees"""
    return CampaignService(db).create_campaign(payload)


@router.post("/assign-employee-retailer", response_model=AssignmentResponse)
def assign_employee_to_retailer(
    payload: EmployeeRetailerAssignRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> Dict[str, Any]:
    """Map an employee to a retailer within a campaign"""
    return CampaignService(db).assign_employee_to_retailer(
        payload.campaign_id, payload.retailer_id, payload.employee_id
    )


@router.patch("/{campaign_id}/retailers/{retailer_id}/dates", response_model=RetailerDatesResponse)
def update_retailer_dates(
    campaign_id: str,
    retailer_id: str,
    payload: RetailerDatesUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> Dict[str, Any]:
    """Update a retailer's start and end dates in a campaign"""
    return CampaignService(db).update_retailer_dates(campaign_id, retailer_id, payload)


@router.get("/{campaign_id}/employee-retailer-mapping")
def get_employee_retailer_mapping(
    campaign_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> Dict[str, Any]:
    """Employees of a campaign with the retailers mapped to each"""
    return CampaignService(db).get_employee_retailer_mapping(campaign_id)


@router.get("/{campaign_id}/retailers/{retailer_id}/assigned-employee")
def get_assigned_employee(
    campaign_id: str,
    retailer_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_session_dependency),
) -> Dict[str, Any]:
    """Employee mapped to a retailer in a campaign, if any"""
    return CampaignService(db).get_assigned_employee(campaign_id, retailer_id)
