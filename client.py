"""
Python client for the BuildPro API.

Every method returns the decoded JSON envelope (``success``, ``data``,
``error``, ``pagination``). Transport failures never raise; they come back as
``{"success": False, "error": ...}`` so callers handle a single shape.

    client = BuildProClient("http://localhost:8000")
    client.create_customer({"name": "Jane Doe", "email": "jane@x.com"})
"""
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Union

import httpx

logger = logging.getLogger(__name__)

Envelope = Dict[str, Any]


class BuildProClient:
    def __init__(self, base_url: str = "http://localhost:8000", http: Optional[httpx.Client] = None, timeout: float = 30.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, fallback: str, **kwargs) -> Envelope:
        try:
            response = self.http.request(method, path, **kwargs)
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(f"{method} {path} failed: {exc}")
            return {"success": False, "error": str(exc) or fallback}

    @staticmethod
    def _params(**params) -> Dict[str, Any]:
        return {key: value for key, value in params.items() if value}

    # Customers

    def list_customers(self, search: Optional[str] = None, sort_by: Optional[str] = None,
                       sort_order: Optional[str] = None, page: Optional[int] = None,
                       limit: Optional[int] = None) -> Envelope:
        params = self._params(search=search, sortBy=sort_by, sortOrder=sort_order, page=page, limit=limit)
        return self._request("GET", "/api/customers", "Failed to fetch customers", params=params)

    def get_customer(self, customer_id: str) -> Envelope:
        return self._request("GET", f"/api/customers/{customer_id}", "Failed to fetch customer")

    def create_customer(self, customer: Dict[str, Any]) -> Envelope:
        return self._request("POST", "/api/customers", "Failed to create customer", json=customer)

    def update_customer(self, customer_id: str, changes: Dict[str, Any]) -> Envelope:
        return self._request("PUT", f"/api/customers/{customer_id}", "Failed to update customer", json=changes)

    def delete_customer(self, customer_id: str) -> Envelope:
        return self._request("DELETE", f"/api/customers/{customer_id}", "Failed to delete customer")

    # Projects

    def list_projects(self, search: Optional[str] = None, customer: Optional[str] = None,
                      location: Optional[str] = None, project_type: Optional[str] = None,
                      sort_by: Optional[str] = None, sort_order: Optional[str] = None,
                      page: Optional[int] = None, limit: Optional[int] = None) -> Envelope:
        params = self._params(search=search, customer=customer, location=location, projectType=project_type,
                              sortBy=sort_by, sortOrder=sort_order, page=page, limit=limit)
        return self._request("GET", "/api/projects", "Failed to fetch projects", params=params)

    def get_project(self, project_id: str) -> Envelope:
        return self._request("GET", f"/api/projects/{project_id}", "Failed to fetch project")

    def create_project(self, project: Dict[str, Any]) -> Envelope:
        return self._request("POST", "/api/projects", "Failed to create project", json=project)

    def update_project(self, project_id: str, changes: Dict[str, Any]) -> Envelope:
        return self._request("PUT", f"/api/projects/{project_id}", "Failed to update project", json=changes)

    def delete_project(self, project_id: str) -> Envelope:
        return self._request("DELETE", f"/api/projects/{project_id}", "Failed to delete project")

    # Tasks

    def list_tasks(self, search: Optional[str] = None, status: Optional[str] = None,
                   priority: Optional[str] = None, sort_by: Optional[str] = None,
                   sort_order: Optional[str] = None, page: Optional[int] = None,
                   limit: Optional[int] = None) -> Envelope:
        params = self._params(search=search, status=status, priority=priority,
                              sortBy=sort_by, sortOrder=sort_order, page=page, limit=limit)
        return self._request("GET", "/api/tasks", "Failed to fetch tasks", params=params)

    def get_task(self, task_id: str) -> Envelope:
        return self._request("GET", f"/api/tasks/{task_id}", "Failed to fetch task")

    def create_task(self, task: Dict[str, Any]) -> Envelope:
        return self._request("POST", "/api/tasks", "Failed to create task", json=task)

    def update_task(self, task_id: str, changes: Dict[str, Any]) -> Envelope:
        return self._request("PUT", f"/api/tasks/{task_id}", "Failed to update task", json=changes)

    def delete_task(self, task_id: str) -> Envelope:
        return self._request("DELETE", f"/api/tasks/{task_id}", "Failed to delete task")

    def _bulk(self, body: Dict[str, Any], fallback: str) -> Envelope:
        return self._request("POST", "/api/tasks/bulk", fallback, json=body)

    def bulk_delete_tasks(self, task_ids: List[str]) -> Envelope:
        return self._bulk({"operation": "delete", "taskIds": task_ids}, "Failed to delete tasks")

    def bulk_update_task_status(self, task_ids: List[str], status: str) -> Envelope:
        body = {"operation": "updateStatus", "taskIds": task_ids, "updateData": {"status": status}}
        return self._bulk(body, "Failed to update task status")

    def bulk_update_task_priority(self, task_ids: List[str], priority: str) -> Envelope:
        body = {"operation": "updatePriority", "taskIds": task_ids, "updateData": {"priority": priority}}
        return self._bulk(body, "Failed to update task priority")

    # Files

    def list_files(self, search: Optional[str] = None, category: Optional[str] = None,
                   project_id: Optional[str] = None, customer_id: Optional[str] = None,
                   sort_by: Optional[str] = None, sort_order: Optional[str] = None,
                   page: Optional[int] = None, limit: Optional[int] = None) -> Envelope:
        params = self._params(search=search, category=category, projectId=project_id, customerId=customer_id,
                              sortBy=sort_by, sortOrder=sort_order, page=page, limit=limit)
        return self._request("GET", "/api/files", "Failed to fetch files", params=params)

    def get_file(self, file_id: str) -> Envelope:
        return self._request("GET", f"/api/files/{file_id}", "Failed to fetch file")

    def create_file(self, record: Dict[str, Any]) -> Envelope:
        return self._request("POST", "/api/files", "Failed to create file", json=record)

    def update_file(self, file_id: str, changes: Dict[str, Any]) -> Envelope:
        return self._request("PUT", f"/api/files/{file_id}", "Failed to update file", json=changes)

    def delete_file(self, file_id: str) -> Envelope:
        return self._request("DELETE", f"/api/files/{file_id}", "Failed to delete file")

    # Uploads

    def upload_file(self, filename: str, content: Union[bytes, BinaryIO],
                    content_type: str = "application/octet-stream") -> Envelope:
        return self._request(
            "POST", "/api/upload", "Failed to upload file",
            files={"file": (filename, content, content_type)},
            data={"fileType": "file"},
        )

    def upload_image(self, filename: str, content: Union[bytes, BinaryIO], content_type: str) -> Envelope:
        return self._request(
            "POST", "/api/upload", "Failed to upload image",
            files={"file": (filename, content, content_type)},
            data={"fileType": "image"},
        )

    # Seed

    def seed(self, clear: bool = False, seed_type: str = "all") -> Envelope:
        return self._request("POST", "/api/seed", "Failed to seed database", json={"clear": clear, "type": seed_type})

    def seed_status(self) -> Envelope:
        return self._request("GET", "/api/seed", "Failed to check seed status")
