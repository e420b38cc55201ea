from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

project_members = Table(
    'project_members', Base.metadata,
    Column('project_id', Integer, ForeignKey('projects.id'), primary_key=True),
    Column('employee_id', Integer, ForeignKey('employees.id'), primary_key=True),
)


class Department(Base):
    __tablename__ = 'departments'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50))

    employees = relationship('Employee', back_populates='department')
    all_employees = relationship('Employee', viewonly=True)


class Employee(Base):
    __tablename__ = 'employees'

    id = Column(Integer, primary_key=True, autoincrement=True)
    department_id = Column(Integer, ForeignKey('departments.id'))

    department = relationship('Department', back_populates='employees')
    badge = relationship('Badge', back_populates='employee', uselist=False)


class Badge(Base):
    __tablename__ = 'badges'

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(Integer, ForeignKey('employees.id'))

    employee = relationship('Employee', back_populates='badge')


class Project(Base):
    """members has no back-relation on Employee."""
    __tablename__ = 'projects'

    id = Column(Integer, primary_key=True, autoincrement=True)

    members = relationship('Employee', secondary=project_members)
