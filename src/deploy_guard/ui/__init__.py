"""User interfaces: CLI router and interactive prompts.

The textual dialog lives in ``deploy_guard.ui.choice_dialog`` and is imported
only when ``--dialog`` is requested.
"""

from deploy_guard.ui.prompts import ConsoleChoicePrompt, ScriptedChoicePrompt

__all__ = ["ConsoleChoicePrompt", "ScriptedChoicePrompt"]
