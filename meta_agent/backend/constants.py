APP_NAME = "Meta-Agent Orchestrator"
APP_VERSION = "1.0.0"
DEFAULT_CORS_ALLOW_ORIGINS = [
	"http://localhost",
	"http://127.0.0.1",
	"http://localhost:3000",
]
DEFAULT_TRUSTED_HOSTS = [
	"127.0.0.1",
	"localhost",
	"testserver",
]

STAGE_ORDER = ("admin", "client", "courier")

# Route segment used when a stage is called over HTTP. The courier stage keeps
# its historical "curier" spelling on the wire; both spellings are served.
STAGE_ROUTES = {
	"admin": "admin",
	"client": "client",
	"courier": "curier",
}
STAGE_ALIASES = {
	"admin": "admin",
	"client": "client",
	"courier": "courier",
	"curier": "courier",
}

# Key under which a stage's result is handed to the next stage.
STAGE_OUTPUT_KEYS = {
	"admin": "adminOutput",
	"client": "clientOutput",
}

DEFAULT_STAGE_TIMEOUT_S = 30.0
DEFAULT_PROVIDER_TIMEOUT_S = 30.0
DEFAULT_CONFIDENCE = 0.75

DEFAULT_CLOUDFLARE_MODEL = "@cf/mistral/mistral-7b-instruct-v0.1"
DEFAULT_GROQ_MODEL = "mixtral-8x7b-32768"
DEFAULT_OPENAI_MODEL = "gpt-4.1-mini"
GROQ_BASE_URL = "https://api.groq.com/openai/v1"
CLOUDFLARE_API_ROOT = "https://api.cloudflare.com/client/v4"
PROVIDER_TEMPERATURE = 0.7
PROVIDER_MAX_TOKENS = 2000
