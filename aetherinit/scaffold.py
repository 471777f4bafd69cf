"""Project files written on top of the cloned template."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from aetherinit.models.manifest import Manifest

logger = logging.getLogger(__name__)

PROJECT_VERSION = "0.1.0"

ENV_CONTENT = """PORT=8080
NODE_ENV=development"""

DEFAULT_SCRIPTS = {
    "start": "node index.js",
    "build": "node assets/js/generate-static.js --",
}

UPDATE_SCRIPTS = {
    "check-updates": "node assets/js/check-updates.js",
    "update-aether": "node assets/js/update-aether.js",
}

GITATTRIBUTES_CONTENT = """# Aether CMS - Prevent merge conflicts on user-specific files
package.json merge={driver}
package-lock.json merge={driver}
.env merge={driver}
content/data/settings.json merge={driver}
.gitignore merge={driver}

# Handle binary files
*.png binary
*.jpg binary
*.jpeg binary
*.gif binary
*.ico binary
*.pdf binary
*.zip binary
"""

CONTENT_DIRS = [
    "content/data",
    "content/themes",
    "content/uploads/images",
    "content/uploads/documents",
    "content/cache/marketplace",
]

SETTINGS_FILE = "content/data/settings.json"
UPDATE_CHECK_INTERVAL_MS = 4 * 60 * 60 * 1000


def default_settings() -> dict[str, Any]:
    return {
        "siteTitle": "My Aether Site",
        "siteDescription": "A site built with Aether CMS",
        "postsPerPage": 10,
        "activeTheme": "default",
        "footerCode": "Content in Motion. Powered by Aether.",
        "updateSettings": {
            "autoCheck": True,
            "checkInterval": UPDATE_CHECK_INTERVAL_MS,
            "notifyAdmin": True,
            "updateChannel": "stable",
            "lastChecked": None,
            "conflictResolution": "preserve-user-settings",
        },
        "userCustomizations": {
            "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "preserveOnUpdate": True,
        },
    }


class ProjectScaffolder:
    """Turns a template checkout into the user's project."""

    def __init__(
        self,
        project_dir: Path,
        project_name: str,
        manifest_file: str = "package.json",
        merge_driver: str = "ours",
    ) -> None:
        self.project_dir = project_dir
        self.project_name = project_name
        self.manifest_file = manifest_file
        self.merge_driver = merge_driver

    def create_all(self) -> None:
        self.create_env_file()
        self.update_manifest()
        self.update_lock_file()
        self.create_gitattributes()
        self.create_default_content()

    def create_env_file(self) -> Path:
        path = self.project_dir / ".env"
        path.write_text(ENV_CONTENT)
        logger.info("Created .env file with default settings")
        return path

    def update_manifest(self) -> bool:
        """Rename the template manifest to the project.

        Install metadata already stamped into the manifest is left alone.
        """
        path = self.project_dir / self.manifest_file
        if not path.exists():
            return False

        manifest = Manifest.load(path)
        manifest.data["name"] = self.project_name
        manifest.data["version"] = PROJECT_VERSION
        manifest.data["private"] = True

        scripts = manifest.data.get("scripts")
        if not isinstance(scripts, dict):
            if scripts:
                logger.warning(f"Replacing non-object scripts in {self.manifest_file}")
            scripts = {}
        for name, command in DEFAULT_SCRIPTS.items():
            scripts[name] = scripts.get(name) or command
        scripts.update(UPDATE_SCRIPTS)
        manifest.data["scripts"] = scripts

        manifest.save()
        logger.info(f"Updated {self.manifest_file} with your project details")
        return True

    def update_lock_file(self) -> bool:
        path = self.project_dir / "package-lock.json"
        if not path.exists():
            return False

        try:
            lock = json.loads(path.read_text(encoding="utf-8"))
            lock["name"] = self.project_name
            lock["version"] = PROJECT_VERSION
            root_package = (lock.get("packages") or {}).get("")
            if isinstance(root_package, dict):
                root_package["name"] = self.project_name
                root_package["version"] = PROJECT_VERSION
            path.write_text(json.dumps(lock, indent=2), encoding="utf-8")
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not update package-lock.json: {e}")
            logger.warning("It will be regenerated during npm install")
            return False

        logger.info("Updated package-lock.json to prevent conflicts")
        return True

    def create_gitattributes(self) -> Path:
        path = self.project_dir / ".gitattributes"
        path.write_text(GITATTRIBUTES_CONTENT.format(driver=self.merge_driver))
        logger.info("Created .gitattributes for conflict-free updates")
        return path

    def create_default_content(self) -> None:
        for content_dir in CONTENT_DIRS:
            (self.project_dir / content_dir).mkdir(parents=True, exist_ok=True)

        settings = self.project_dir / SETTINGS_FILE
        if not settings.exists():
            settings.write_text(json.dumps(default_settings(), indent=2), encoding="utf-8")

        logger.info("Created update-friendly content structure")
