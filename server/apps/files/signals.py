"""Signal handlers for files app."""

import logging

from django.core.files.storage import default_storage
from django.db.models.signals import post_delete
from django.dispatch import receiver

from server.apps.files.models import File

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=File)
def delete_file_from_storage(
    sender: type[File],
    instance: File,
    **kwargs: object,
) -> None:
    """Delete the stored blob once its File record is gone.

    Files are only deleted administratively (Django admin or ORM), so
    this is the single place where blobs of existing records are
    removed. Storage failures are logged, the DB delete stands.

    Args:
        sender: The File model class.
        instance: The File instance being deleted.
        **kwargs: Additional signal arguments.
    """
    storage_name = instance.file.name
    if not storage_name:
        return

    try:
        if not default_storage.exists(storage_name):
            logger.warning(
                'Blob already missing for deleted file %s (ID: %d)',
                storage_name,
                instance.id,
            )
            return
        default_storage.delete(storage_name)
    except Exception:
        # Orphaned blob is left for a storage cleanup job
        logger.exception(
            'Failed to delete blob of deleted file (orphaned): %s',
            storage_name,
        )
    else:
        logger.info(
            'Blob deleted with file record: %s (ID: %d)',
            storage_name,
            instance.id,
        )
