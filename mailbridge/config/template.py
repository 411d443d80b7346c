"""Default configuration template written by ``mailbridge config init``."""

CONFIG_TEMPLATE = """\
# mailbridge configuration

[defaults]
max_tree_depth = 64
batch_workers = 1
sender = "me"
message_id_host = "mailbridge.local"

# Add provider accounts below.
#
# [accounts.personal]
# provider = "gmail"
# client_id = "xxxxxx.apps.googleusercontent.com"
# redirect_url = "http://localhost:8080/callback"
#
# For client_secret, use the MAILBRIDGE_GMAIL_CLIENT_SECRET environment variable.
#
# [accounts.work]
# provider = "outlook"
# tenant_id = "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"
# client_id = "xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx"
# redirect_url = "http://localhost:8080/callback"
#
# For client_secret, use the MAILBRIDGE_MS365_CLIENT_SECRET environment variable.
"""
