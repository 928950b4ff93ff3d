"""Local voice moderation core.

Self-contained modules:
- volume (display <-> internal volume curves)
- id_lists (newline-delimited user id lists)
- exemptions (who is never moderated, and why)
- engine (override lifecycle + timers + manual-change detection)
- tracker (who shares the operator's voice channel)

Nothing here talks to Discord directly; collaborators are injected.
"""
