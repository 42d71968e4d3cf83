"""Error catalog for organization registration requests."""

ORGANIZATION_REQUEST_ERRORS = {
    'GET': {'message': 'Request not found', 'errorCode': 'REQ_001'},
    'APPROVE': {'message': 'Only pending requests can be approved', 'errorCode': 'REQ_002'},
    'REJECT': {'message': 'Only pending requests can be rejected', 'errorCode': 'REQ_003'},
    'EMAIL_IN_USE': {'message': 'A user or pending request already uses this email', 'errorCode': 'REQ_004'},
}
