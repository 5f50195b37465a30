"""Fix options, fix application, cleaning actions and undo history."""
