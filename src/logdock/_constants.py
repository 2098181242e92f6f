# Path of the log collection endpoint, relative to the configured API URL
LOGS_PATH = '/v1/logs'

# User id used when neither an explicit id nor a callback result is available
DEFAULT_USER_ID = 'system'

# Seconds to wait on the collection endpoint before giving up
DEFAULT_TIMEOUT = 5.0

# Request headers
CONTENT_TYPE_HEADER = 'Content-Type'
API_KEY_HEADER = 'X-Api-Key'
# Cloudflare Access service token, for endpoints behind Cloudflare Zero Trust
CF_ACCESS_CLIENT_ID_HEADER = 'CF-Access-Client-Id'
CF_ACCESS_CLIENT_SECRET_HEADER = 'CF-Access-Client-Secret'

# Environment variables read by `LogDockConfig.from_env()`
API_URL_ENV_VAR = 'LOGDOCK_API_URL'
API_KEY_ENV_VAR = 'LOGDOCK_API_KEY'
APP_ENV_VAR = 'LOGDOCK_APP'
DEFAULT_USER_ID_ENV_VAR = 'LOGDOCK_DEFAULT_USER_ID'
DEBUG_ENV_VAR = 'LOGDOCK_DEBUG'
CF_ACCESS_CLIENT_ID_ENV_VAR = 'LOGDOCK_CF_ACCESS_CLIENT_ID'
CF_ACCESS_CLIENT_SECRET_ENV_VAR = 'LOGDOCK_CF_ACCESS_CLIENT_SECRET'
TIMEOUT_ENV_VAR = 'LOGDOCK_TIMEOUT'

# Optional CA bundle for the HTTPS transport
CA_BUNDLE_ENV_VAR = 'LOGDOCK_CA_BUNDLE'

# Set to a truthy value to make `logdock init` overwrite existing files
FORCE_INIT_ENV_VAR = 'LOGDOCK_FORCE_INIT'
