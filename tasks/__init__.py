"""tasks/ -- Task records, the resources the auth core protects."""
