"""Error catalog for the application catalog and access requests."""

APPLICATION_ERRORS = {
    'LOGIN': {'message': 'Login link is required for this application type', 'errorCode': 'APP_001'},
    'GET': {'message': 'Application Not Found', 'errorCode': 'APP_002'},
    'UPLOAD': {'message': 'Error while uploading logo', 'errorCode': 'APP_003'},
    'DELETE': {'message': 'Error while deleting the application', 'errorCode': 'APP_005'},
    'ALREADY_EXISTS': {'message': 'An application with this name already exists', 'errorCode': 'APP_006'},
}

ORGANIZATION_APPLICATION_ERRORS = {
    'GET': {'message': 'Application not found', 'errorCode': 'ONG_APP_002'},
    'RESTORE': {'message': 'Only restricted applications can be restored', 'errorCode': 'ONG_APP_009'},
}

APPLICATION_REQUEST_ERRORS = {
    'APPLICATION_STATUS': {'message': 'Cannot request an application that is not ACTIVE.', 'errorCode': 'APP_REQ_001'},
    'REQ_EXISTS': {'message': 'There is already a pending request with the same data.', 'errorCode': 'APP_REQ_002'},
    'APP_EXISTS': {'message': 'The app is already assigned to the organization.', 'errorCode': 'APP_REQ_003'},
    'NOT_FOUND': {'message': 'Request not found', 'errorCode': 'APP_REQ_004'},
    'NOT_PENDING': {'message': 'Could not update a Request that is not in PENDING state', 'errorCode': 'APP_REQ_005'},
    'CREATE': {'message': 'Error while creating the request.', 'errorCode': 'APP_REQ_006'},
    'APPLICATION_TYPE': {'message': 'Cannot request an independent application.', 'errorCode': 'APP_REQ_007'},
    'UPDATE': {'message': 'Error while updating the request.', 'errorCode': 'APP_REQ_008'},
}
