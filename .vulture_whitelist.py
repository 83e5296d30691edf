# Vulture whitelist for legitimate API definitions that appear unused
# This file tells vulture to ignore these symbols which are part of our public API

# Model fields and aliases populated from JSON
http_only
same_site
populate_by_name
COOKIES_APPLIED
NAVIGATING
INJECTING

# Protocol definitions - type system components
BrowserSession
FileSystem
get_cookies  # Protocol method
add_cookies  # Protocol method
evaluate_in_page  # Protocol method
storage_origins  # Protocol method
get_local_storage  # Protocol method
mkdir_recursive  # Protocol method

# MCP components registered by decorators
browser_save_storage_state
browser_load_storage_state
health_check
get_server_info
get_storage_state_docs
save_session_assistant
restore_session_assistant

# Exception utilities - part of public API
ErrorResult.to_dict
operation_type
