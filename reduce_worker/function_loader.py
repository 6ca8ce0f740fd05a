#!/usr/bin/env python3
"""
Dynamic Function Loader for user reduce functions
Loads the reduce function from a user-provided MapReduce job file
"""

import importlib.util
import sys
import os


class FunctionLoader:
    """Dynamically loads a user-provided reduce function from a Python file"""

    def __init__(self, map_reduce_file: str):
        """
        Initialize the function loader

        Args:
            map_reduce_file: Path to user's Python file containing the job functions
        """
        self.map_reduce_file = map_reduce_file
        self.module = None

    def load_module(self):
        """
        Dynamically load user-provided module

        Returns:
            The loaded module object

        Raises:
            FileNotFoundError: If the job file doesn't exist
            ImportError: If the file can't be loaded as a Python module
        """
        if not os.path.exists(self.map_reduce_file):
            raise FileNotFoundError(f"Map/Reduce file not found: {self.map_reduce_file}")

        spec = importlib.util.spec_from_file_location("user_mapreduce", self.map_reduce_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Failed to load job file: {self.map_reduce_file}")
        module = importlib.util.module_from_spec(spec)
        sys.modules["user_mapreduce"] = module
        spec.loader.exec_module(module)
        self.module = module
        return module

    def get_reduce_function(self):
        """
        Get reduce function from loaded module

        Returns:
            The reduce_function callable from the module

        Raises:
            AttributeError: If module doesn't define 'reduce_function'
            TypeError: If 'reduce_function' isn't callable
        """
        if not self.module:
            self.load_module()

        if not hasattr(self.module, 'reduce_function'):
            raise AttributeError("Module must define 'reduce_function'")
        if not callable(self.module.reduce_function):
            raise TypeError("'reduce_function' must be callable")
        return self.module.reduce_function
