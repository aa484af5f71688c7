"""
Trace JSON file loading using the ijson parser.
"""

import ijson
from typing import Any

from ..core.errors import InvalidFormat, InvalidResponse


class TraceFileProcessor:
    """Loads raw trace documents saved from debug_traceTransaction."""
    
    @staticmethod
    def load_trace(file_path: str) -> Any:
        """
        Load a trace JSON file.
        
        Accepts either the bare trace value (object or array) or a full
        JSON-RPC response envelope, in which case the 'result' member is
        returned.
        
        Args:
            file_path: Path to the trace JSON file
            
        Returns:
            Raw trace value (dict or list)
            
        Raises:
            FileNotFoundError: If the file does not exist
            InvalidFormat: If the file is not valid JSON
            InvalidResponse: If the file holds a JSON-RPC error response
        """
        print(f"Processing {file_path}...")
        
        with open(file_path, 'rb') as f:
            try:
                documents = list(ijson.items(f, '', use_float=True))
            except ijson.JSONError as e:
                raise InvalidFormat(f"Trace file '{file_path}' is not valid JSON: {e}") from e
        
        if not documents:
            raise InvalidFormat(f"Trace file '{file_path}' is empty")
        raw = documents[0]
        
        if isinstance(raw, dict) and 'jsonrpc' in raw:
            if raw.get('error') is not None:
                raise InvalidResponse(f"Trace file '{file_path}' holds an RPC error: {raw['error']}")
            if 'result' not in raw:
                raise InvalidFormat(f"Trace file '{file_path}' is a JSON-RPC envelope without 'result'")
            raw = raw['result']
        
        steps = len(raw) if isinstance(raw, list) else None
        if steps is not None:
            print(f"Completed reading file: {steps} top-level steps found.")
        else:
            print("Completed reading file.")
        
        return raw
