from pydantic import BaseModel, ConfigDict


class MirrorSource(BaseModel):
    """Value object identifying the remote repository snapshot being mirrored.

    The archive host serves ``<repo>-<branch>/`` as the single top-level
    directory of every branch snapshot, which is what ``archive_prefix``
    reproduces.
    """

    model_config = ConfigDict(frozen=True)

    user: str
    repo: str
    branch: str = "main"
    host: str = "github.com"

    @property
    def archive_url(self) -> str:
        return f"https://{self.host}/{self.user}/{self.repo}/archive/refs/heads/{self.branch}.zip"

    @property
    def archive_prefix(self) -> str:
        return f"{self.repo}-{self.branch}"

    @property
    def clone_url(self) -> str:
        return f"https://{self.host}/{self.user}/{self.repo}.git"
