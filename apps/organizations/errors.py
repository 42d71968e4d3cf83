"""
Error catalog for the organizations app.

Each entry is {"message", "errorCode"}; build exceptions with
BadRequestError.from_catalog(ORGANIZATION_ERRORS['...']).
"""
from apps.core.exceptions import BadRequestError, InternalServerError
from apps.core.file_manager_service import FileUploadError

HTTP_ERRORS_MESSAGES = {
    'ORGANIZATION': 'Organization not found',
    'REGION': 'Missing region(s)',
    'LOCAL': 'Missing city/cities',
    'MISSING_FEDERATIONS': 'Missing federations',
    'MISSING_COALITIONS': 'Missing coalitions',
    'MISSING_BRANCHES': 'Missing branches',
    'MISSING_INTERNATIONAL_ORGANIZATION': 'Missing International Organization',
    'MINIMUM_DIRECTORS': 'Minimum 3 directors',
    'ANAF_ERROR': 'Incoming data not corresponding with data from ANAF',
    'UPLOAD_FILES': 'Error while uploading the files',
}

ORGANIZATION_ERRORS = {
    'GET': {'message': HTTP_ERRORS_MESSAGES['ORGANIZATION'], 'errorCode': 'ORG001'},
    'REGION': {'message': HTTP_ERRORS_MESSAGES['REGION'], 'errorCode': 'ORG002'},
    'LOCAL': {'message': HTTP_ERRORS_MESSAGES['LOCAL'], 'errorCode': 'ORG003'},
    'FEDERATIONS': {'message': HTTP_ERRORS_MESSAGES['MISSING_FEDERATIONS'], 'errorCode': 'ORG004'},
    'COALITIONS': {'message': HTTP_ERRORS_MESSAGES['MISSING_COALITIONS'], 'errorCode': 'ORG005'},
    'BRANCHES': {'message': HTTP_ERRORS_MESSAGES['MISSING_BRANCHES'], 'errorCode': 'ORG006'},
    'INTERNATIONAL_ORGANIZATION': {
        'message': HTTP_ERRORS_MESSAGES['MISSING_INTERNATIONAL_ORGANIZATION'],
        'errorCode': 'ORG007',
    },
    'DIRECTORS_MIN': {'message': HTTP_ERRORS_MESSAGES['MINIMUM_DIRECTORS'], 'errorCode': 'ORG008'},
    'ANAF': {'message': HTTP_ERRORS_MESSAGES['ANAF_ERROR'], 'errorCode': 'ORG009'},
    'UPLOAD': {'message': HTTP_ERRORS_MESSAGES['UPLOAD_FILES'], 'errorCode': 'ORG010'},
    'ANAF_ERRORED': {'message': 'Could not fetch data from ANAF', 'errorCode': 'ANAF001'},

    'CREATE': {'message': 'Error while creating the organization', 'errorCode': 'ORG011'},
    'ACTIVATE': {'message': 'Organization is already active', 'errorCode': 'ORG012'},
    'ALREADY_RESTRICTED': {'message': 'Organization is already restricted', 'errorCode': 'ORG013'},
    'RESTORE': {'message': 'Only restricted organizations can be restored', 'errorCode': 'ORG014'},
    'DELETE_NOT_PENDING': {'message': 'Only pending organizations can be deleted', 'errorCode': 'ORG015'},
    'DELETE': {'message': 'Error while deleting the organization', 'errorCode': 'ORG016'},
    'ALREADY_EXIST': {'message': 'Reporting entries already exist for this year', 'errorCode': 'ORG017'},
    'ADD_NEW': {'message': 'Error while adding new reporting entries', 'errorCode': 'ORG018'},
    'IMAGE': {'message': 'Invalid image type', 'errorCode': 'ORG019'},
    'SIZE': {'message': 'File exceeds the maximum allowed size', 'errorCode': 'ORG020'},
}

ORGANIZATION_FINANCIAL_ERRORS = {
    'GET': {'message': 'Financial report not found', 'errorCode': 'ORG_FIN_001'},
}

ORGANIZATION_REPORT_ERRORS = {
    'GET_REPORT': {'message': 'Report not found', 'errorCode': 'ORG_REP_001'},
    'GET_PARTNER': {'message': 'Partner list not found', 'errorCode': 'ORG_REP_002'},
    'GET_INVESTOR': {'message': 'Investor list not found', 'errorCode': 'ORG_REP_003'},
    'DELETE': {'message': 'Error while deleting the list', 'errorCode': 'ORG_REP_004'},
}

ORGANIZATION_VALIDATION_ERRORS = {
    'NAME': {'message': 'Organization name already exists', 'errorCode': 'ORG_VAL_001'},
    'CUI': {'message': 'CUI already exists', 'errorCode': 'ORG_VAL_002'},
    'RAF': {'message': 'RAF number already exists', 'errorCode': 'ORG_VAL_003'},
    'EMAIL': {'message': 'Email already exists', 'errorCode': 'ORG_VAL_004'},
    'PHONE': {'message': 'Phone already exists', 'errorCode': 'ORG_VAL_005'},
    'ALIAS': {'message': 'Alias already exists', 'errorCode': 'ORG_VAL_006'},
}


def upload_error_to_service_error(error):
    """
    Map a FileUploadError from the storage gateway to the client-facing
    error: bad image type and size are the caller's fault, anything else
    is ours.
    """
    if error.kind == FileUploadError.IMAGE:
        return BadRequestError.from_catalog(ORGANIZATION_ERRORS['IMAGE'])
    if error.kind == FileUploadError.SIZE:
        return BadRequestError.from_catalog(ORGANIZATION_ERRORS['SIZE'])
    return InternalServerError.from_catalog(ORGANIZATION_ERRORS['UPLOAD'])
