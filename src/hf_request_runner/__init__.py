"""
HF Request Runner package.

Provides:
- A one-shot client for the Hugging Face inference router (text and chat payloads)
- Credential resolution from the environment or a local .env file
"""
