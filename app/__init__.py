"""Mix feedback service.

Decodes an uploaded mix, computes level metrics and asks a chat model
for short mixing notes.
"""
