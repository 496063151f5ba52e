"""Tool implementations: each tool module offers a JSON schema and an execute function; edit_ops holds text edit operations."""