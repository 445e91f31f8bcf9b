"""Services Layer — orchestrates core logic over the dataset, cache and template stores.

Invariants:
    - IO only through the Protocols in core/repository_protocols.py
    - One file per operation group (resolution, generation, validation, templates)
"""
