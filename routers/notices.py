from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from db.init import as_dict, get_db, transaction
from models.notice import Notice, NoticeIn, NoticeStatusIn
from models.staff import Staff
from utils.deps import get_current_user
from utils.errors import NotFoundError

router = APIRouter(dependencies=[Depends(get_current_user)])


def _with_author(db: Session):
    return (
        db.query(Notice, Staff.name.label("created_by_name"))
        .outerjoin(Staff, Staff.id == Notice.created_by)
    )


def _notice_row(db: Session, notice_id: int) -> dict:
    row = _with_author(db).filter(Notice.id == notice_id).first()
    if row is None:
        raise NotFoundError("Notice not found")
    notice, author = row
    return {**as_dict(notice), "created_by_name": author}


def _get_notice(db: Session, notice_id: int) -> Notice:
    notice = db.query(Notice).filter(Notice.id == notice_id).first()
    if not notice:
        raise NotFoundError("Notice not found")
    return notice


@router.get("")
def get_notices(db: Session = Depends(get_db)):
    rows = _with_author(db).order_by(Notice.created_at.desc(), Notice.id.desc()).all()
    return [{**as_dict(n), "created_by_name": author} for n, author in rows]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_notice(data: NoticeIn, db: Session = Depends(get_db)):
    with transaction(db):
        notice = Notice(title=data.title, content=data.content, created_by=data.created_by)
        db.add(notice)
        db.flush()
        result = _notice_row(db, notice.id)
    return result


@router.patch("/{notice_id}")
def update_notice(notice_id: int, data: NoticeIn, db: Session = Depends(get_db)):
    with transaction(db):
        notice = _get_notice(db, notice_id)
        notice.title = data.title
        notice.content = data.content
        db.flush()
        result = _notice_row(db, notice_id)
    return result


@router.patch("/{notice_id}/status")
def toggle_notice_status(notice_id: int, data: NoticeStatusIn, db: Session = Depends(get_db)):
    with transaction(db):
        notice = _get_notice(db, notice_id)
        notice.status = data.status
        db.flush()
        result = _notice_row(db, notice_id)
    return result


@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notice(notice_id: int, db: Session = Depends(get_db)):
    with transaction(db):
        db.delete(_get_notice(db, notice_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
