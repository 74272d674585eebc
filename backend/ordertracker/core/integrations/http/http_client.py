"""
Generic async HTTP client wrapper using aiohttp.
Every failure surfaces as PersistenceError carrying the server's message.
"""

import asyncio
from typing import Optional, Dict, Any
import aiohttp
import logging

from ordertracker.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Async HTTP client wrapper using aiohttp.
    Provides get/post/put/delete methods with an optional bearer token.
    Requests are attempted once; callers decide whether to retry.
    """
    
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        token: Optional[str] = None,
    ):
        """
        Initialize HTTP client.
        
        Args:
            base_url: Optional base URL for all requests
            timeout: Request timeout in seconds
            token: Bearer token sent with every request
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.token = token
        self._session: Optional[aiohttp.ClientSession] = None
    
    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session
    
    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
    
    def set_token(self, token: Optional[str]) -> None:
        """Replace (or clear) the bearer token."""
        self.token = token
    
    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint
    
    def _build_headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = {}
        if self.token:
            merged["Authorization"] = f"Bearer {self.token}"
        if headers:
            merged.update(headers)
        return merged
    
    @staticmethod
    def _error_message(payload: Any, fallback: str) -> str:
        """Pull the message out of the API error envelope."""
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str):
                return error
            if payload.get("detail"):
                return str(payload["detail"])
        return fallback
    
    async def _request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> Any:
        """
        Make an HTTP request and decode the JSON body.
        
        Args:
            method: HTTP method
            url: Request URL
            headers: Extra request headers
            **kwargs: Additional arguments for aiohttp request
            
        Returns:
            Decoded JSON body, or None for empty responses
            
        Raises:
            PersistenceError: On non-2xx responses or transport failures
        """
        session = await self._get_session()
        try:
            async with session.request(
                method, url, headers=self._build_headers(headers), **kwargs
            ) as response:
                if response.status == 204:
                    return None
                try:
                    payload = await response.json(content_type=None)
                except ValueError:
                    # Non-JSON body, e.g. an HTML error page from a proxy
                    if response.status < 400:
                        logger.error(f"{method} {url} returned a malformed body")
                        raise PersistenceError("Malformed response from server", status_code=502)
                    payload = None
                if response.status >= 400:
                    message = self._error_message(payload, response.reason or "Request failed")
                    logger.warning(f"{method} {url} failed with {response.status}: {message}")
                    raise PersistenceError(message, status_code=response.status, details=payload)
                return payload
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{method} {url} failed: {e}")
            raise PersistenceError(str(e) or "Request failed", status_code=503) from e
    
    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make GET request.
        
        Args:
            endpoint: API endpoint
            params: Query parameters
            headers: Request headers
            
        Returns:
            JSON response
        """
        url = self._build_url(endpoint)
        return await self._request("GET", url, params=params, headers=headers)
    
    async def post(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make POST request."""
        url = self._build_url(endpoint)
        return await self._request("POST", url, json=json, headers=headers)
    
    async def put(
        self,
        endpoint: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make PUT request."""
        url = self._build_url(endpoint)
        return await self._request("PUT", url, json=json, headers=headers)
    
    async def delete(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make DELETE request."""
        url = self._build_url(endpoint)
        return await self._request("DELETE", url, headers=headers)
