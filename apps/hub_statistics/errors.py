"""Error catalog for the dashboard statistics."""

STATISTICS_ERRORS = {
    'REQUEST_STATISTICS': {'message': 'Error while getting the organization request statistics', 'errorCode': 'STATISTICS_001'},
    'ORGANIZATION_STATUS_STATISTICS': {'message': 'Error while getting the organization status statistics', 'errorCode': 'STATISTICS_002'},
    'HUB_STATISTICS': {'message': 'Error while getting the hub statistics', 'errorCode': 'STATISTICS_003'},
    'ORGANIZATION_STATISTICS': {'message': 'Error while getting the organization statistics', 'errorCode': 'STATISTICS_004'},
}
