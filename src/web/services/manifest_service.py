"""Service for reading and updating stored manifests."""

from typing import Any

from src import log
from src.config.database import NotificationsDB
from src.exceptions import ManifestError, ManifestImportError
from src.models.db.manifest import Manifest

__all__ = ["ManifestService"]


class ManifestService:
    """Manifest store keyed by canonical `@id`."""

    def __init__(self, db: NotificationsDB, base_url: str) -> None:
        """Bind the service to a database and the canonical id base URL.

        Args:
            db (NotificationsDB): Database manager.
            base_url (str): Prefix of canonical manifest ids, without a trailing
                slash.
        """
        self.db = db
        self.base_url = base_url.rstrip("/")

    def canonical_id(self, name: str) -> str:
        """Build the canonical `@id` of the manifest called `name`."""
        return f"{self.base_url}/{name}/manifest"

    def get_manifest(self, at_id: str) -> dict[str, Any] | None:
        """Return the stored manifest document, or None if it does not exist."""
        with self.db() as ctx:
            manifest = (
                ctx.session.query(Manifest).filter(Manifest.at_id == at_id).first()
            )
            if manifest is None:
                return None
            return dict(manifest.document)

    def upsert_manifest(self, document: Any) -> str:
        """Insert a manifest or replace the stored document with the same `@id`.

        Args:
            document (Any): Manifest JSON object; must carry a string `@id`.

        Returns:
            str: The manifest's `@id`.

        Raises:
            ManifestImportError: If the document is not an object with an `@id`.
        """
        if not isinstance(document, dict):
            raise ManifestImportError("Manifest must be a JSON object")
        at_id = document.get("@id")
        if not isinstance(at_id, str) or not at_id.strip():
            raise ManifestImportError("Manifest is missing a string '@id'")

        with self.db() as ctx:
            manifest = (
                ctx.session.query(Manifest).filter(Manifest.at_id == at_id).first()
            )
            if manifest is None:
                ctx.session.add(Manifest(at_id=at_id, document=dict(document)))
                action = "Stored"
            else:
                manifest.document = dict(document)
                action = "Replaced"
            ctx.session.commit()

        log.info(f"{action} manifest $$'{at_id}'$$")
        return at_id

    def replace_attribute(self, at_id: str, label: str, data: Any) -> bool:
        """Replace one top-level attribute of the manifest with `@id == at_id`.

        The rest of the document, `@id` included, is left untouched. Writing a
        value equal to the stored one is skipped.

        Args:
            at_id (str): Canonical id of the manifest to update.
            label (str): Attribute to replace.
            data (Any): New attribute value.

        Returns:
            bool: True if a manifest matched `at_id`.

        Raises:
            ManifestError: If asked to replace `@id` itself.
        """
        if label == "@id":
            raise ManifestError("The manifest '@id' attribute cannot be replaced")

        with self.db() as ctx:
            manifest = (
                ctx.session.query(Manifest)
                .filter(Manifest.at_id == at_id)
                .with_for_update()
                .first()
            )
            if manifest is None:
                return False
            if label in manifest.document and manifest.document[label] == data:
                return True

            # Assign a new dict so the JSON column is flagged as modified
            manifest.document = {**manifest.document, label: data}
            ctx.session.commit()

        log.debug(f"Replaced $$'{label}'$$ of manifest $$'{at_id}'$$")
        return True
