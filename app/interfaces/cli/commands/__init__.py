from .bulk_upload import Command as BulkUploadCommand
from .create_admin import Command as CreateAdminCommand

COMMANDS = {
    CreateAdminCommand.name: CreateAdminCommand,
    BulkUploadCommand.name: BulkUploadCommand,
}

__all__ = ["COMMANDS", "BulkUploadCommand", "CreateAdminCommand"]
