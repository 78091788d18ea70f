"""Core pipeline for the Neighbors relay.

Modules
-------
config
    Environment configuration (pydantic-settings) and logging setup.
errors
    Error taxonomy with HTTP status mapping.
outcome
    ``Ok`` / ``Degraded`` / ``Fatal`` stage results.
validation
    Form submission validation.
prompt_builder
    Prompt construction for the portrait transformation.
image_client
    Image-editing collaborator and the transform stage.
storage
    Object paths, object store collaborator and the store stage.
records
    Member records: insert and newest-first listing.
services
    Process-wide collaborator handles.
pipeline
    Stage sequencing for one submission.
"""
