"""Personal learnings stored as markdown files, in two scopes.

Layout:
    <repository>/learnings/             # Global scope (git-synced if a git repo)
    │   ├── git-rebase.md               # Front matter + markdown body
    │   └── README.md                   # Ignored
    <cwd>/learnings/                    # Local scope (plain files, never synced)

No index is kept anywhere; every list, get and metadata call rescans disk.
"""

__version__ = "1.0.0"
