# Overview: Default records written the first time a collection key is empty.

"""
Seed data.

Users are seeded with plaintext `password` fields; the user repository hashes
them on first load (the same backfill that upgrades old rosters), so no
plaintext ever stays in storage.
"""

from __future__ import annotations

from agraria.time_utils import to_utc_z, utcnow


def _stamp() -> str:
    return to_utc_z(utcnow())


def default_users() -> list[dict]:
    now = _stamp()
    return [
        {
            "id": 1,
            "username": "admin",
            "password": "admin123",
            "email": "admin@sistemaagraria.com",
            "firstName": "Administrador",
            "lastName": "Sistema",
            "document": "12345678",
            "address": "Dirección Principal 123",
            "locality": "Buenos Aires",
            "party": "CABA",
            "postalCode": "1000",
            "phone": "+54 11 1234-5678",
            "altPhone": "",
            "role": "administrador",
            "active": True,
            "securityQuestion": "¿Cuál es el nombre de tu primera mascota?",
            "securityAnswer": "firulais",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 2,
            "username": "jefe",
            "password": "jefe123",
            "email": "jefe.area@sistemaagraria.com",
            "firstName": "Jefe",
            "lastName": "Área",
            "document": "20111222",
            "role": "jefe_area",
            "active": True,
            "securityQuestion": "¿En qué ciudad naciste?",
            "securityAnswer": "buenos aires",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 3,
            "username": "prof.animal",
            "password": "prof123",
            "email": "prof.animal@sistemaagraria.com",
            "firstName": "Ana",
            "lastName": "Martínez",
            "document": "30222333",
            "role": "profesor_animal",
            "active": True,
            "securityQuestion": "¿Cuál es tu color favorito?",
            "securityAnswer": "azul",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 4,
            "username": "prof.vegetal",
            "password": "prof123",
            "email": "prof.vegetal@sistemaagraria.com",
            "firstName": "María",
            "lastName": "González",
            "document": "30444555",
            "role": "profesor_vegetal",
            "active": True,
            "securityQuestion": "¿Cuál es tu comida favorita?",
            "securityAnswer": "milanesa",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 5,
            "username": "jgarcia",
            "password": "usuario123",
            "email": "juan.garcia@email.com",
            "firstName": "Juan",
            "lastName": "García",
            "document": "87654321",
            "address": "Calle Secundaria 456",
            "locality": "La Plata",
            "party": "Buenos Aires",
            "postalCode": "1900",
            "phone": "+54 221 987-6543",
            "altPhone": "+54 11 9876-5432",
            "role": "estandar",
            "active": True,
            "securityQuestion": "¿Cuál es el nombre de tu primera mascota?",
            "securityAnswer": "firulais",
            "createdAt": now,
            "updatedAt": now,
        },
    ]


def default_environments() -> list[dict]:
    now = _stamp()
    return [
        {
            "id": 1,
            "environmentName": "Huerta Principal",
            "environmentType": "vegetal",
            "responsibleId": 4,
            "responsibleName": "María González",
            "responsibleTeacher": "Prof. María González",
            "year": "3",
            "division": "A",
            "group": "Grupo 1",
            "observations": "Huerta destinada al cultivo de hortalizas de estación",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 2,
            "environmentName": "Vivero Escolar",
            "environmentType": "vegetal",
            "responsibleId": 4,
            "responsibleName": "María González",
            "responsibleTeacher": "Prof. María González",
            "year": "2",
            "division": "B",
            "group": "Grupo 2",
            "observations": "Espacio para la producción de plantines y plantas ornamentales",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 3,
            "environmentName": "Granja Avícola",
            "environmentType": "animal",
            "responsibleId": 3,
            "responsibleName": "Ana Martínez",
            "responsibleTeacher": "Prof. Ana Martínez",
            "year": "4",
            "division": "A",
            "group": "Grupo 3",
            "observations": "Cría y manejo de aves de corral",
            "createdAt": now,
            "updatedAt": now,
        },
    ]


def default_activities() -> list[dict]:
    now = _stamp()
    return [
        {
            "id": 1,
            "environmentId": 1,
            "environmentName": "Huerta Principal",
            "environmentType": "vegetal",
            "responsibleTeacher": "Prof. María González",
            "year": "3",
            "division": "A",
            "group": "Grupo 1",
            "activityDate": "2024-01-15",
            "activityTime": "08:00",
            "duration": 120,
            "activityTitle": "Siembra de Tomates",
            "activityDescription": (
                "Preparación del terreno y siembra de semillas de tomate en almácigos. "
                "Los estudiantes aprendieron sobre la preparación del sustrato y las técnicas de siembra."
            ),
            "observations": "Excelente participación de los estudiantes",
            "createdAt": now,
            "updatedAt": now,
        },
        {
            "id": 2,
            "environmentId": 3,
            "environmentName": "Granja Avícola",
            "environmentType": "animal",
            "responsibleTeacher": "Prof. Ana Martínez",
            "year": "4",
            "division": "A",
            "group": "Grupo 3",
            "activityDate": "2024-01-16",
            "activityTime": "09:30",
            "duration": 90,
            "activityTitle": "Alimentación y Cuidado de Gallinas",
            "activityDescription": (
                "Actividad práctica de alimentación de gallinas ponedoras. "
                "Se enseñó sobre tipos de alimento, horarios de alimentación y cuidados básicos."
            ),
            "observations": "Se observó mejora en la producción de huevos",
            "createdAt": now,
            "updatedAt": now,
        },
    ]


def default_products() -> list[dict]:
    return [
        {"id": 1, "name": "Semillas de Tomate", "category": "semillas", "currentStock": 25, "minStock": 10, "unitPrice": 15.50, "unit": "paquete"},
        {"id": 2, "name": "Fertilizante Orgánico", "category": "fertilizantes", "currentStock": 8, "minStock": 5, "unitPrice": 25.00, "unit": "kg"},
        {"id": 3, "name": "Herramientas de Jardín", "category": "herramientas", "currentStock": 15, "minStock": 3, "unitPrice": 45.00, "unit": "unidad"},
        {"id": 4, "name": "Macetas de Barro", "category": "macetas", "currentStock": 2, "minStock": 5, "unitPrice": 8.50, "unit": "unidad"},
        {"id": 5, "name": "Sustrato para Plantas", "category": "sustratos", "currentStock": 12, "minStock": 8, "unitPrice": 12.00, "unit": "kg"},
    ]


def default_movements() -> list[dict]:
    return [
        {
            "id": 1,
            "productId": 1,
            "productName": "Semillas de Tomate",
            "type": "entrada",
            "quantity": 10,
            "reason": "Compra inicial",
            "date": "2024-01-15",
            "user": "Admin Usuario",
        },
        {
            "id": 2,
            "productId": 2,
            "productName": "Fertilizante Orgánico",
            "type": "salida",
            "quantity": 2,
            "reason": "Venta",
            "date": "2024-01-14",
            "user": "Admin Usuario",
        },
    ]
