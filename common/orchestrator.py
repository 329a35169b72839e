# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Centralized orchestrator for managing and executing sequences of tasks.
"""

import logging
from typing import Any, Callable, Dict, List, Optional


class Orchestrator:
    """A centralized orchestrator to run a series of defined tasks in order."""

    HALT_KEY = "halt"

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            orchestrator_logger: An optional logger instance.
        """
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        # Shared context for tasks to pass state between each other
        self.context: Dict[str, Any] = {}

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
    ):
        """
        Adds a task to the execution list.

        Args:
            name: A human-readable name for the task.
            func: The function to execute for this task. It receives the
                  shared context and the settings as keyword arguments.
            args: A list of positional arguments to pass to the function.
            kwargs: A dictionary of keyword arguments to pass to the function.
            fatal: If True, an exception from this task is re-raised and
                   stops the orchestration.
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
            "fatal": fatal,
        })
        self.logger.debug(f"Task '{name}' added to the queue.")

    def run(self) -> bool:
        """
        Executes all added tasks in sequence.

        A task may set context["halt"] to stop the sequence after it
        completes.

        Returns:
            True if every task ran, False if a task halted the sequence early.

        Raises:
            Exception: Whatever a fatal task raised.
        """
        self.logger.info("Orchestration started.")
        for i, task in enumerate(self.tasks):
            task_name = task["name"]
            self.logger.info(
                f"--- Stage {i + 1}: Running task '{task_name}' ---"
            )

            try:
                task["kwargs"]["context"] = self.context
                task["kwargs"]["app_settings"] = self.app_settings

                result = task["func"](*task["args"], **task["kwargs"])
                self.context[f"{task_name}_result"] = result

                self.logger.info(
                    f"✅ Task '{task_name}' completed."
                )

            except Exception as e:
                if task["fatal"]:
                    self.logger.critical(
                        f"🔥 Task '{task_name}' failed: {e}"
                    )
                    self.logger.error(
                        "A fatal error occurred. Halting orchestration."
                    )
                    raise
                self.logger.warning(
                    f"Task '{task_name}' failed: {e}. Task was non-fatal, continuing orchestration.",
                    exc_info=self.logger.isEnabledFor(logging.DEBUG),
                )

            if self.context.get(self.HALT_KEY):
                self.logger.info(
                    f"Task '{task_name}' requested a halt. Skipping the remaining tasks."
                )
                return False

        self.logger.info("✨ Orchestration finished.")
        return True
