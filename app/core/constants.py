# Row rejection reasons
REASON_MISSING_FIELDS = "Missing required fields: {fields}"
REASON_DUPLICATE = "Duplicate entry: Email or Contact already exists"
REASON_INVALID_EMAIL = "Invalid email format"
REASON_INVALID_CONTACT = "Invalid contact number"
REASON_INVALID_PINCODE = "Invalid pincode"
REASON_INSERT_CONFLICT = "Insert-time conflict: Email or Contact already exists"

# Failed rows export columns
EXPORT_ROW_NUMBER_COLUMN = "Row Number"
EXPORT_REASON_COLUMN = "Reason"

SPREADSHEET_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Blob folders for single retailer registration
RETAILER_FILE_FOLDERS = {
    "outletPhoto": "retailers/outlet_photos",
    "govtIdPhoto": "retailers/govt_id",
    "personPhoto": "retailers/person_photos",
    "registrationFormFile": "retailers/registration_forms",
}

# Request logging skips these path prefixes
LOG_EXCLUDE_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")
