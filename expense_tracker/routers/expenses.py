from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from starlette import status

from expense_tracker.core.config import Settings
from expense_tracker.db.dal import Database
from expense_tracker.models.expense import ExpenseIn, ExpenseOut, ExpenseUpdateIn
from expense_tracker.services import expense_service
from expense_tracker.services.expense_query import build_expense_query, run_expense_query
from expense_tracker.services.expense_validation import ExpenseValidator

router = APIRouter(prefix="/expenses", tags=["expenses"])

# Dependencies -----------------------------------------------------


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(settings: Settings = Depends(get_app_settings)) -> Database:
    return Database(settings.db_path, timeout=settings.db_timeout_seconds)


def get_validator(settings: Settings = Depends(get_app_settings)) -> ExpenseValidator:
    return ExpenseValidator(settings.allowed_categories)


# Helpers ----------------------------------------------------------


def _cache_headers(response: Response, seconds: int) -> None:
    if seconds > 0:
        response.headers["Cache-Control"] = f"public, max-age={seconds}"


# Routes -----------------------------------------------------------
@router.get(
    "", response_model=List[ExpenseOut], summary="List expenses with optional filters"
)
def list_expenses(
    response: Response,
    sort_by: Optional[str] = Query(None, alias="sortBy", description="name | amount | date"),
    order: Optional[str] = Query(None, description="asc | desc"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Inclusive lower amount bound"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Inclusive upper amount bound"),
    start_date: Optional[str] = Query(None, alias="startDate", description="Inclusive start date"),
    end_date: Optional[str] = Query(None, alias="endDate", description="Inclusive end date"),
    category: Optional[str] = Query(None, description="Exact category; unknown values are ignored"),
    page: Optional[str] = Query(None, description="1-based page number"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Items per page (1-100)"),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    # Raw strings on purpose: bad values are normalized, never rejected
    query = build_expense_query(
        categories=settings.allowed_categories,
        min_price=min_price,
        max_price=max_price,
        start_date=start_date,
        end_date=end_date,
        category=category,
        sort_by=sort_by,
        order=order,
        page=page,
        page_size=page_size,
        paginate=settings.paginated,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
    result = run_expense_query(db, query)
    response.headers.update(result.headers())
    _cache_headers(response, settings.response_cache_seconds)
    return result.items


@router.get(
    "/categories", response_model=List[str], summary="List allowed expense categories"
)
def list_categories(response: Response, settings: Settings = Depends(get_app_settings)):
    _cache_headers(response, settings.categories_cache_seconds)
    return settings.allowed_categories


@router.get(
    "/{expense_id}", response_model=ExpenseOut, name="get_expense", summary="Get one expense"
)
def get_expense(
    expense_id: int,
    response: Response,
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    expense = expense_service.get_expense(db, expense_id)
    _cache_headers(response, settings.response_cache_seconds)
    return expense


@router.post(
    "",
    response_model=ExpenseOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create an expense",
)
def create_expense(
    payload: ExpenseIn,
    request: Request,
    response: Response,
    db: Database = Depends(get_db),
    validator: ExpenseValidator = Depends(get_validator),
):
    expense = expense_service.create_expense(db, validator, payload)
    response.headers["Location"] = str(request.url_for("get_expense", expense_id=expense.id))
    return expense


@router.put(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace an expense",
)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdateIn,
    db: Database = Depends(get_db),
    validator: ExpenseValidator = Depends(get_validator),
):
    expense_service.update_expense(db, validator, expense_id, payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an expense",
)
def delete_expense(expense_id: int, db: Database = Depends(get_db)):
    expense_service.delete_expense(db, expense_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
