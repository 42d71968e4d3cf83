from datetime import datetime
from enum import Enum
from typing import List, Optional

from ninja import Schema


class StatisticsType(str, Enum):
    DAILY = 'daily'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'


class RequestStatisticsOut(Schema):
    labels: List[str]
    approved: List[int]
    declined: List[int]


class StatusStatisticsOut(Schema):
    labels: List[str]
    active: List[int]
    restricted: List[int]


class HubStatisticsOut(Schema):
    numberOfActiveOrganizations: int
    numberOfUpdatedOrganizations: int
    numberOfPendingRequests: int
    numberOfUsers: int
    meanNumberOfUsers: int
    numberOfApps: int


class GeneralHubStatisticsOut(Schema):
    numberOfActiveOrganizations: int
    numberOfApplications: int


class OrganizationStatisticsOut(Schema):
    organizationCreatedOn: datetime
    organizationSyncedOn: Optional[datetime] = None
    numberOfInstalledApps: int
    numberOfUsers: int
    numberOfErroredFinancialReports: int
    numberOfErroredReportsInvestorsPartners: int
    hubStatistics: GeneralHubStatisticsOut
