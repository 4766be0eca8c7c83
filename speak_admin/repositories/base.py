from typing import List, Optional, TypeVar, Generic, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import func

T = TypeVar('T')

class BaseRepository(Generic[T]):
    """基础Repository类，提供按表的增删改查和计数"""

    def __init__(self, db: Session, model_class: T):
        self.db = db
        self.model_class = model_class

    def get_by_id(self, id: int) -> Optional[T]:
        """根据ID获取记录"""
        return self.db.query(self.model_class).filter(self.model_class.id == id).first()

    def create(self, **kwargs) -> T:
        """创建新记录"""
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self.db.commit()
        self.db.refresh(instance)
        return instance

    def create_many(self, rows: Sequence[dict]) -> List[T]:
        """批量创建记录，同一事务提交"""
        instances = [self.model_class(**row) for row in rows]
        self.db.add_all(instances)
        self.db.commit()
        for instance in instances:
            self.db.refresh(instance)
        return instances

    def update(self, id: int, **kwargs) -> Optional[T]:
        """更新记录"""
        instance = self.get_by_id(id)
        if instance:
            for key, value in kwargs.items():
                setattr(instance, key, value)
            self.db.commit()
            self.db.refresh(instance)
        return instance

    def delete(self, id: int) -> bool:
        """删除记录"""
        instance = self.get_by_id(id)
        if instance:
            self.db.delete(instance)
            self.db.commit()
            return True
        return False

    def count(self, **filters) -> int:
        """统计记录数"""
        query = self.db.query(func.count(self.model_class.id))
        for attr, value in filters.items():
            if hasattr(self.model_class, attr):
                query = query.filter(getattr(self.model_class, attr) == value)
        return query.scalar() or 0

