"""Security scheme constants and builders.

``SecurityMixin`` adds the builder methods to ``Document``; it expects
``components`` and ``security`` attributes.
"""

from openapi_synth.document.base import SecurityScheme

SECURITY_TYPE_API_KEY = "apiKey"
SECURITY_TYPE_HTTP = "http"
SECURITY_TYPE_OAUTH2 = "oauth2"
SECURITY_TYPE_OPENID = "openIdConnect"

HTTP_SCHEME_BEARER = "bearer"
HTTP_SCHEME_BASIC = "basic"

API_KEY_IN_QUERY = "query"
API_KEY_IN_HEADER = "header"
API_KEY_IN_COOKIE = "cookie"

BEARER_FORMAT_JWT = "JWT"


class SecurityMixin:
    def add_security_scheme(self, name: str, scheme: SecurityScheme) -> None:
        self.components.security_schemes[name] = scheme

    def add_api_key_auth(self, name: str, key_name: str, location: str, description: str | None = None) -> None:
        """API key sent as ``key_name`` in the query, a header or a cookie."""
        self.add_security_scheme(
            name,
            SecurityScheme(type=SECURITY_TYPE_API_KEY, name=key_name, location=location, description=description),
        )

    def add_bearer_auth(self, name: str, bearer_format: str = BEARER_FORMAT_JWT, description: str | None = None) -> None:
        self.add_security_scheme(
            name,
            SecurityScheme(
                type=SECURITY_TYPE_HTTP,
                scheme=HTTP_SCHEME_BEARER,
                bearer_format=bearer_format,
                description=description,
            ),
        )

    def add_basic_auth(self, name: str, description: str | None = None) -> None:
        self.add_security_scheme(
            name, SecurityScheme(type=SECURITY_TYPE_HTTP, scheme=HTTP_SCHEME_BASIC, description=description)
        )

    def add_oauth2_auth(self, name: str, flows: dict, description: str | None = None) -> None:
        self.add_security_scheme(name, SecurityScheme(type=SECURITY_TYPE_OAUTH2, flows=flows, description=description))

    def add_openid_connect_auth(self, name: str, url: str, description: str | None = None) -> None:
        self.add_security_scheme(
            name, SecurityScheme(type=SECURITY_TYPE_OPENID, open_id_connect_url=url, description=description)
        )

    def add_security_requirement(self, scheme_name: str, scopes: list[str] | None = None) -> None:
        """Require ``scheme_name``; scopes only apply to OAuth2 and OpenID."""
        self.security.append({scheme_name: list(scopes or [])})

    def add_multiple_security_requirement(self, schemes: dict[str, list[str]]) -> None:
        """Require all of ``schemes`` together."""
        self.security.append({name: list(scopes) for name, scopes in schemes.items()})
