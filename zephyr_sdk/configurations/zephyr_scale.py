from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

CLOUD_API_URL = "https://api.zephyrscale.smartbear.com/v2"


class ZephyrScaleConfiguration(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            "metadata": {
                "label": "Zephyr Scale",
                "icon_url": "zephyr.svg",
                "sections": {
                    "auth": {
                        "required": True,
                        "subsections": [
                            {
                                "name": "Token",
                                "fields": ["token"]
                            },
                            {
                                "name": "Username & Password",
                                "fields": ["username", "password"]
                            }
                        ]
                    },
                },
                "section": "credentials",
                "type": "zephyr_scale",
                "categories": ["test management"],
                "extra_categories": ["zephyr", "test automation", "test case management", "test planning"],
            }
        }
    )
    base_url: Optional[str] = Field(
        description="Zephyr Scale Cloud API URL (defaults to the public Cloud API), "
                    "or the Jira base URL of a Data Center instance (required)",
        default=None)
    deployment: Literal["cloud", "datacenter"] = Field(description="Deployment type", default="cloud")
    token: Optional[SecretStr] = Field(description="API token", default=None)
    username: Optional[str] = Field(description="Username (Data Center)", default=None)
    password: Optional[SecretStr] = Field(description="Password (Data Center)", default=None)
    timeout: float = Field(description="Request timeout in seconds", default=30)

    @model_validator(mode='after')
    def resolve_base_url(self):
        if not self.base_url:
            # only the cloud API has a well-known address
            if self.deployment == "datacenter":
                raise ValueError("base_url is required for Data Center deployments")
            self.base_url = CLOUD_API_URL
        return self

    @staticmethod
    def check_connection(settings: dict) -> str | None:
        """
        Check the connection to Zephyr Scale.

        Args:
            settings: Dictionary containing Zephyr Scale configuration
                - base_url: API base URL (defaults to the Zephyr Scale Cloud API)
                - deployment: 'cloud' or 'datacenter' (default 'cloud')
                - token, or username and password (Data Center)

        Returns:
            None if connection successful, error message string if failed
        """
        import requests

        deployment = settings.get("deployment") or "cloud"
        base_url = (settings.get("base_url") or "").strip().rstrip("/")
        if not base_url:
            if deployment == "datacenter":
                return "Zephyr Scale Data Center requires the Jira base URL"
            base_url = CLOUD_API_URL
        if not base_url.startswith(("http://", "https://")):
            return "Zephyr Scale URL must start with http:// or https://"

        token = settings.get("token")
        token_value = token.get_secret_value() if hasattr(token, 'get_secret_value') else token
        password = settings.get("password")
        password_value = password.get_secret_value() if hasattr(password, 'get_secret_value') else password
        username = settings.get("username")
        if not (token_value and str(token_value).strip()) and not (username and password_value):
            return "Zephyr Scale API token, or username and password, are required"

        if deployment == "datacenter":
            test_url = f"{base_url}/rest/atm/1.0/healthcheck"
        else:
            test_url = f"{base_url}/projects"

        request_kwargs = {"timeout": 10}
        if token_value and str(token_value).strip():
            request_kwargs["headers"] = {"Authorization": f"Bearer {str(token_value).strip()}"}
        else:
            request_kwargs["auth"] = (username, password_value)

        try:
            response = requests.get(test_url, **request_kwargs)
        except requests.exceptions.SSLError as e:
            return f"SSL certificate verification failed: {str(e)}"
        except requests.exceptions.ConnectionError:
            return f"Cannot connect to Zephyr Scale at {base_url}: connection refused"
        except requests.exceptions.Timeout:
            return f"Connection to Zephyr Scale at {base_url} timed out"
        except requests.exceptions.RequestException as e:
            return f"Error connecting to Zephyr Scale: {str(e)}"

        if response.status_code == 200:
            return None
        elif response.status_code == 401:
            return "Authentication failed: invalid credentials"
        elif response.status_code == 403:
            return "Access forbidden: credentials lack required permissions"
        elif response.status_code == 404:
            return "Zephyr Scale API endpoint not found: verify the API URL"
        return f"Zephyr Scale API returned status code {response.status_code}"
