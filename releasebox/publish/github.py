"""Publish a draft release to GitHub through the REST API."""

import re
from pathlib import Path
from typing import Any

import requests

from releasebox.core.errors import PublishError
from releasebox.core.structlog_logger import StructlogMixin
from releasebox.models.results import PublishResult, ReleaseRecord


DEFAULT_API_URL = "https://api.github.com"
API_VERSION = "2022-11-28"

# upload_url comes back as a URI template, e.g. ".../assets{?name,label}"
_URI_TEMPLATE = re.compile(r"\{[^}]*\}$")


def list_release_files(output_dir: Path) -> list[Path]:
    """Every regular file directly inside the flat output directory, by name."""
    return sorted((p for p in output_dir.iterdir() if p.is_file()), key=lambda p: p.name)


class GitHubReleasePublisher(StructlogMixin):
    """Create a release on GitHub and attach every staged file as an asset."""

    def __init__(
        self,
        repository: str,
        token: str | None,
        api_url: str = DEFAULT_API_URL,
        session: requests.Session | None = None,
        timeout: float = 60.0,
    ) -> None:
        super().__init__()
        if repository.count("/") != 1:
            raise PublishError(
                f"Repository must look like 'owner/name', got {repository!r}",
                {"repository": repository},
            )
        if not token:
            raise PublishError(
                "A GitHub token is required to publish a release",
                {"repository": repository},
            )
        self.repository = repository
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "releasebox",
            }
        )

    def _handle_response(self, response: requests.Response, action: str) -> Any:
        """Return the JSON body or raise PublishError."""
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            context = {
                "action": action,
                "status_code": response.status_code,
                "repository": self.repository,
            }
            if response.status_code in (401, 403):
                raise PublishError(
                    f"GitHub rejected the credentials while trying to {action}", context
                ) from e
            raise PublishError(
                f"GitHub request failed while trying to {action}: "
                f"{response.status_code} {response.text[:200]}",
                context,
            ) from e
        try:
            return response.json()
        except ValueError as e:
            raise PublishError(
                f"GitHub returned invalid JSON while trying to {action}",
                {"action": action, "status_code": response.status_code},
            ) from e

    def create_release(self, record: ReleaseRecord) -> dict[str, Any]:
        url = f"{self.api_url}/repos/{self.repository}/releases"
        payload = {
            "tag_name": record.tag,
            "name": record.title,
            "body": record.body,
            "draft": record.draft,
        }
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PublishError(
                f"Network error creating release {record.tag}: {e}",
                {"tag": record.tag, "repository": self.repository},
            ) from e
        data: dict[str, Any] = self._handle_response(response, "create the release")
        self.logger.info(
            "release_created",
            tag=record.tag,
            release_id=data.get("id"),
            draft=record.draft,
        )
        return data

    def upload_asset(self, upload_url: str, path: Path) -> dict[str, Any]:
        url = _URI_TEMPLATE.sub("", upload_url)
        try:
            with path.open("rb") as f:
                response = self.session.post(
                    url,
                    params={"name": path.name},
                    data=f,
                    headers={"Content-Type": "application/octet-stream"},
                    timeout=self.timeout,
                )
        except requests.exceptions.RequestException as e:
            # RequestException subclasses OSError; this clause must stay first.
            raise PublishError(
                f"Network error uploading {path.name}: {e}", {"asset": path.name}
            ) from e
        except OSError as e:
            raise PublishError(
                f"Cannot read asset {path}: {e}", {"asset": str(path)}
            ) from e
        data: dict[str, Any] = self._handle_response(
            response, f"upload asset {path.name}"
        )
        self.logger.info("release_asset_uploaded", asset=path.name)
        return data

    def publish(self, output_dir: Path, record: ReleaseRecord) -> PublishResult:
        """Create the release, then upload each file of ``output_dir``.

        Raises:
            PublishError: On any HTTP, network or file error
        """
        files = list_release_files(output_dir)
        release = self.create_release(record)
        result = PublishResult(
            tag=record.tag,
            draft=record.draft,
            release_id=release.get("id"),
            url=release.get("html_url"),
        )
        if not files:
            self.logger.warning("release_without_assets", tag=record.tag)
            result.add_message(f"Release {record.tag} has no assets")

        upload_url = release.get("upload_url")
        if files and not upload_url:
            raise PublishError(
                "GitHub response did not include an upload_url",
                {"tag": record.tag, "release_id": release.get("id")},
            )
        for path in files:
            self.upload_asset(str(upload_url), path)
            result.assets.append(path.name)

        result.add_message(
            f"Created {'draft ' if record.draft else ''}release {record.tag} "
            f"with {len(result.assets)} assets"
        )
        return result


def create_github_release_publisher(
    repository: str,
    token: str | None,
    api_url: str = DEFAULT_API_URL,
) -> GitHubReleasePublisher:
    """Create a GitHub release publisher instance."""
    return GitHubReleasePublisher(repository, token, api_url=api_url)
