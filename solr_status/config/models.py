"""Pydantic configuration model for the Solr status exporter."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SolrStatusConfig(BaseModel):
    """Immutable runtime configuration, resolved once at startup."""

    model_config = ConfigDict(frozen=True)

    server: str  # host[:port], no scheme
    core: str
    use_https: bool = False
    interval: int = Field(default=20, ge=1)
    hostname: str = "localhost"
    max_backoff: int = Field(default=0, ge=0)  # 0 disables backoff
    log_level: str = "INFO"

    @field_validator('server')
    @classmethod
    def validate_server(cls, v: str) -> str:
        """Server is host[:port]; the scheme comes from use_https."""
        v = v.strip()
        if not v:
            raise ValueError('server must not be empty')
        if '://' in v:
            raise ValueError('server must be host[:port] without a scheme (use --https)')
        return v.rstrip('/')

    @field_validator('core', 'hostname')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'unknown log level: {v}')
        return v

    @property
    def scheme(self) -> str:
        return "https" if self.use_https else "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.server}/solr"

    def core_status_url_for(self, core: str) -> str:
        """Core admin STATUS endpoint for the given core."""
        return f"{self.base_url}/admin/cores?action=STATUS&core={core}&wt=json"

    @property
    def thread_dump_url(self) -> str:
        """Server-wide thread dump endpoint."""
        return f"{self.base_url}/admin/info/threads"
